"""
Business logic for provider identities.

Providers are stored in the ``providers`` table with their service
details, areas and availability as JSON columns.  Every write goes
through ``_persist_fields`` which recomputes ``hourly_rate`` with
``average_hourly_rate`` so the derived rate can never drift from the
service details.
"""

import logging
import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from ..core.db import dump_json, get_connection, load_json, utc_now
from ..core.errors import Conflict, NotFound, ValidationFailed
from ..core.security import hash_password
from ..schemas.provider import (
    AvailabilitySlot,
    AvailabilityUpdate,
    ProfileReview,
    ProviderCreate,
    ProviderListItem,
    ProviderProfile,
    ProviderProfileUpdate,
    ProviderRead,
)
from ..schemas.job import JobSummary


logger = logging.getLogger(__name__)

JSON_COLUMNS = ("service_types", "service_details", "service_areas", "availability", "certifications")


def average_hourly_rate(service_details: Iterable[Dict[str, Any]], fallback: float) -> float:
    """Mean of the per‑service rates rounded to 2 decimals.

    With no service details the provider's own ``fallback`` rate stays
    authoritative.
    """
    rates = [float(d.get("hourlyRate", d.get("hourly_rate", 0))) for d in service_details]
    if not rates:
        return fallback
    return round(sum(rates) / len(rates), 2)


def calculate_service_price(provider: ProviderRead, service_type: str, hours: float) -> float:
    """Price of ``hours`` of ``service_type`` at the provider's matching rate.

    Falls back to the provider's average ``hourly_rate`` when it lists no
    detail for that service type.
    """
    detail = next((d for d in provider.service_details if d.type == service_type), None)
    rate = detail.hourly_rate if detail else provider.hourly_rate
    return round(rate * hours, 2)


def row_to_provider(row: sqlite3.Row) -> ProviderRead:
    return ProviderRead(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        phone=row["phone"],
        service_types=load_json(row["service_types"]),
        service_details=load_json(row["service_details"]),
        service_areas=load_json(row["service_areas"]),
        hourly_rate=row["hourly_rate"],
        availability=load_json(row["availability"]),
        rating=row["rating"],
        language=row["language"],
        profile_image=row["profile_image"],
        bio=row["bio"],
        experience=row["experience"],
        certifications=load_json(row["certifications"]),
        created_at=row["created_at"],
    )


def _column_values(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: dump_json(value) if key in JSON_COLUMNS else value for key, value in fields.items()}


class ProviderService:
    """Service for provider registration, profile, availability and listing."""

    @classmethod
    async def create_provider(cls, data: ProviderCreate) -> ProviderRead:
        """Insert a new provider with a hashed password.

        Raises ``Conflict`` if the e‑mail is already registered as a
        provider.
        """
        details = [d.model_dump(by_alias=True) for d in data.service_details]
        fields = {
            "first_name": data.first_name,
            "last_name": data.last_name,
            "email": data.email,
            "phone": data.phone,
            "password": hash_password(data.password),
            "service_types": list(dict.fromkeys(data.service_types)),
            "service_details": details,
            "service_areas": data.service_areas,
            "hourly_rate": average_hourly_rate(details, data.hourly_rate),
            "language": data.language,
            "created_at": utc_now(),
            "last_active": utc_now(),
        }
        values = _column_values(fields)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            exists = cursor.execute("SELECT id FROM providers WHERE email = ?", (data.email,)).fetchone()
            if exists:
                raise Conflict("This email is already in use")
            try:
                cursor.execute(
                    f"INSERT INTO providers ({', '.join(values)}) VALUES ({', '.join('?' for _ in values)})",
                    tuple(values.values()),
                )
            except sqlite3.IntegrityError:
                raise Conflict("This email is already in use")
            provider_id = cursor.lastrowid
            conn.commit()
            logger.info("Registered provider %s (%s)", provider_id, data.email)
            row = cursor.execute("SELECT * FROM providers WHERE id = ?", (provider_id,)).fetchone()
            return row_to_provider(row)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @classmethod
    async def get_provider(cls, provider_id: int) -> Optional[ProviderRead]:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM providers WHERE id = ?", (provider_id,)).fetchone()
            return row_to_provider(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def get_credentials(cls, email: str) -> Optional[sqlite3.Row]:
        """Return ``(id, password)`` for ``email`` or ``None``.  Used by login only."""
        conn = get_connection()
        try:
            return conn.execute("SELECT id, password FROM providers WHERE email = ?", (email,)).fetchone()
        finally:
            conn.close()

    @classmethod
    async def _persist_fields(cls, provider_id: int, fields: Dict[str, Any]) -> ProviderRead:
        """Write ``fields`` and recompute the derived hourly rate.

        The current record is read first so the rate reflects the stored
        service details when the update does not replace them.  The
        read and the write are separate statements: two concurrent
        profile saves for the same provider are last writer wins.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT * FROM providers WHERE id = ?", (provider_id,)).fetchone()
            if not row:
                raise NotFound("Provider not found")
            details = fields.get("service_details", load_json(row["service_details"]))
            fields["hourly_rate"] = average_hourly_rate(details, fields.get("hourly_rate", row["hourly_rate"]))
            fields["last_active"] = utc_now()
            values = _column_values(fields)
            assignments = ", ".join(f"{column} = ?" for column in values)
            cursor.execute(
                f"UPDATE providers SET {assignments} WHERE id = ?",
                (*values.values(), provider_id),
            )
            conn.commit()
            updated = cursor.execute("SELECT * FROM providers WHERE id = ?", (provider_id,)).fetchone()
            return row_to_provider(updated)
        finally:
            conn.close()

    @classmethod
    async def update_profile(cls, provider_id: int, data: ProviderProfileUpdate) -> ProviderRead:
        """Apply the whitelisted profile fields present in ``data``."""
        fields = {}
        for key, value in data.model_dump(exclude_none=True).items():
            if key in ("service_details", "availability"):
                value = [item.model_dump(by_alias=True) for item in getattr(data, key)]
            fields[key] = value
        if "service_types" in fields:
            fields["service_types"] = list(dict.fromkeys(fields["service_types"]))
        logger.info("Updating profile of provider %s: %s", provider_id, sorted(fields))
        return await cls._persist_fields(provider_id, fields)

    @classmethod
    async def update_availability(cls, provider_id: int, data: AvailabilityUpdate) -> List[AvailabilitySlot]:
        if data.availability is None:
            raise ValidationFailed("Please provide valid availability")
        slots = [slot.model_dump(by_alias=True) for slot in data.availability]
        provider = await cls._persist_fields(provider_id, {"availability": slots})
        logger.info("Provider %s now has %d availability slots", provider_id, len(slots))
        return provider.availability

    @classmethod
    async def list_providers(cls) -> List[ProviderListItem]:
        """All providers, highest stored rating first, then newest first."""
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT * FROM providers ORDER BY rating DESC, created_at DESC, id DESC"
            ).fetchall()
        finally:
            conn.close()
        items = []
        for row in rows:
            provider = row_to_provider(row)
            items.append(ProviderListItem(**provider.model_dump(), service_cities=provider.service_areas))
        return items

    @classmethod
    async def get_profile(cls, provider_id: int) -> ProviderProfile:
        """Provider projection with its job summaries and received reviews."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT * FROM providers WHERE id = ?", (provider_id,)).fetchone()
            if not row:
                raise NotFound("Provider not found")
            jobs = cursor.execute(
                """
                SELECT j.id, j.status, j.service_type, j.scheduled_date, c.first_name, c.last_name
                FROM jobs j LEFT JOIN clients c ON c.id = j.client_id
                WHERE j.provider_id = ?
                ORDER BY j.created_at DESC, j.id DESC
                """,
                (provider_id,),
            ).fetchall()
            reviews = cursor.execute(
                """
                SELECT r.id, r.rating, r.comment, r.created_at, c.first_name, c.last_name
                FROM reviews r LEFT JOIN clients c ON c.id = r.client_id
                WHERE r.provider_id = ?
                ORDER BY r.created_at DESC, r.id DESC
                """,
                (provider_id,),
            ).fetchall()
        finally:
            conn.close()

        def client_name(r: sqlite3.Row) -> str:
            if r["first_name"] is None:
                return "Unknown client"
            return f"{r['first_name']} {r['last_name']}"

        return ProviderProfile(
            **row_to_provider(row).model_dump(),
            requests=[
                JobSummary(
                    id=j["id"],
                    status=j["status"],
                    service_type=j["service_type"],
                    date=j["scheduled_date"],
                    client_name=client_name(j),
                )
                for j in jobs
            ],
            reviews=[
                ProfileReview(
                    id=r["id"],
                    rating=r["rating"],
                    comment=r["comment"],
                    date=r["created_at"],
                    client_name=client_name(r),
                )
                for r in reviews
            ],
        )
