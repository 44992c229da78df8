"""
Business logic for the job ledger.

Jobs are read and moved only within the calling provider's scope: every
query filters on ``(job id, provider id)`` in a single statement, so a
provider asking for someone else's job gets the same 404 as for a job
that does not exist.

Status changes are unconditional by default.  ``ALLOWED_TRANSITIONS``
describes the intended lifecycle and is enforced only when
``settings.strict_job_transitions`` is enabled.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from ..core.config import settings
from ..core.db import get_connection, load_json, utc_now
from ..core.errors import NotFound, ValidationFailed
from ..schemas.job import JobClient, JobCreate, JobRead
from .provider_service import calculate_service_price, row_to_provider


logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Dict[str, frozenset] = {
    "pending": frozenset({"accepted", "declined", "cancelled"}),
    "accepted": frozenset({"completed", "cancelled"}),
    "declined": frozenset(),
    "completed": frozenset(),
    "cancelled": frozenset(),
}

_JOB_COLUMNS = """
    j.*, c.id AS c_id, c.first_name AS c_first_name, c.last_name AS c_last_name,
    c.email AS c_email, c.phone AS c_phone, c.addresses AS c_addresses
"""


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def _row_to_job(row: sqlite3.Row, with_addresses: bool = False) -> JobRead:
    client = None
    if row["c_id"] is not None:
        client = JobClient(
            id=row["c_id"],
            first_name=row["c_first_name"],
            last_name=row["c_last_name"],
            email=row["c_email"],
            phone=row["c_phone"],
            addresses=load_json(row["c_addresses"]) if with_addresses else None,
        )
    return JobRead(
        id=row["id"],
        client=client,
        provider=row["provider_id"],
        service_type=row["service_type"],
        property_type=row["property_type"],
        status=row["status"],
        scheduled_date=row["scheduled_date"],
        address=row["address"],
        description=row["description"],
        price=row["price"],
        decline_reason=row["decline_reason"],
        completion_notes=row["completion_notes"],
        completed_at=row["completed_at"],
        created_at=row["created_at"],
    )


class JobService:
    """Service for recording jobs and the provider‑facing transitions."""

    @classmethod
    async def create_job(cls, client_id: int, provider_id: int, data: JobCreate) -> JobRead:
        """Record a ``pending`` job between an existing client and provider.

        When ``price`` is omitted but ``hours`` is given, the price is
        computed from the provider's rate for the requested service type.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM clients WHERE id = ?", (client_id,)).fetchone():
                raise NotFound("Client not found")
            provider_row = cursor.execute("SELECT * FROM providers WHERE id = ?", (provider_id,)).fetchone()
            if not provider_row:
                raise NotFound("Provider not found")
            price = data.price
            if price is None and data.hours is not None:
                price = calculate_service_price(row_to_provider(provider_row), data.service_type, data.hours)
            cursor.execute(
                """
                INSERT INTO jobs (client_id, provider_id, service_type, property_type, status,
                                  scheduled_date, address, description, price, created_at)
                VALUES (?, ?, ?, ?, 'pending', ?, ?, ?, ?, ?)
                """,
                (
                    client_id,
                    provider_id,
                    data.service_type,
                    data.property_type,
                    data.scheduled_date.isoformat(),
                    data.address,
                    data.description,
                    price,
                    utc_now(),
                ),
            )
            job_id = cursor.lastrowid
            conn.commit()
            logger.info("Recorded job %s for client %s with provider %s", job_id, client_id, provider_id)
        finally:
            conn.close()
        return await cls.get_job(job_id, provider_id)

    @classmethod
    async def list_jobs(cls, provider_id: int) -> List[JobRead]:
        """All jobs of ``provider_id``, newest first, with client contact details."""
        conn = get_connection()
        try:
            rows = conn.execute(
                f"""
                SELECT {_JOB_COLUMNS}
                FROM jobs j LEFT JOIN clients c ON c.id = j.client_id
                WHERE j.provider_id = ?
                ORDER BY j.created_at DESC, j.id DESC
                """,
                (provider_id,),
            ).fetchall()
            return [_row_to_job(row) for row in rows]
        finally:
            conn.close()

    @classmethod
    async def get_job(cls, job_id: int, provider_id: int) -> JobRead:
        """Fetch one job owned by ``provider_id``; ``NotFound`` otherwise."""
        conn = get_connection()
        try:
            row = conn.execute(
                f"""
                SELECT {_JOB_COLUMNS}
                FROM jobs j LEFT JOIN clients c ON c.id = j.client_id
                WHERE j.id = ? AND j.provider_id = ?
                """,
                (job_id, provider_id),
            ).fetchone()
        finally:
            conn.close()
        if not row:
            raise NotFound("Job not found or not authorized")
        return _row_to_job(row, with_addresses=True)

    @classmethod
    async def _transition(cls, job_id: int, provider_id: int, status: str, fields: Dict[str, Any]) -> JobRead:
        """Set ``status`` plus ``fields`` on the caller's job in one UPDATE.

        The ownership scope is part of the UPDATE itself.  In strict mode
        the allowed source states are added to the same WHERE clause, so
        the guard and the write cannot interleave with another writer.
        """
        values = {"status": status, **fields}
        assignments = ", ".join(f"{column} = ?" for column in values)
        params: List[Any] = [*values.values(), job_id, provider_id]
        query = f"UPDATE jobs SET {assignments} WHERE id = ? AND provider_id = ?"
        if settings.strict_job_transitions:
            sources = [s for s, targets in ALLOWED_TRANSITIONS.items() if status in targets]
            query += f" AND status IN ({', '.join('?' for _ in sources)})"
            params.extend(sources)

        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(query, tuple(params))
            changed = cursor.rowcount
            conn.commit()
            if not changed and settings.strict_job_transitions:
                current = cursor.execute(
                    "SELECT status FROM jobs WHERE id = ? AND provider_id = ?",
                    (job_id, provider_id),
                ).fetchone()
                if current:
                    raise ValidationFailed(f"Cannot move a job from {current['status']} to {status}")
        finally:
            conn.close()
        if not changed:
            raise NotFound("Job not found or not authorized")
        logger.info("Provider %s set job %s to %s", provider_id, job_id, status)
        return await cls.get_job(job_id, provider_id)

    @classmethod
    async def accept_job(cls, job_id: int, provider_id: int) -> JobRead:
        return await cls._transition(job_id, provider_id, "accepted", {})

    @classmethod
    async def decline_job(cls, job_id: int, provider_id: int, reason: Optional[str] = None) -> JobRead:
        return await cls._transition(
            job_id, provider_id, "declined", {"decline_reason": reason or "Not specified"}
        )

    @classmethod
    async def complete_job(cls, job_id: int, provider_id: int, notes: Optional[str] = None) -> JobRead:
        return await cls._transition(
            job_id,
            provider_id,
            "completed",
            {"completion_notes": notes or "", "completed_at": utc_now()},
        )
