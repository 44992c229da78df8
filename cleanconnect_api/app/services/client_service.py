"""
Business logic for client identities.

Clients are stored in the ``clients`` table.  Their addresses live in a
JSON column as an ordered list; every address carries a generated id
and at most one of them is flagged ``isDefault``.
"""

import logging
import sqlite3
import uuid
from typing import Any, Dict, List, Optional

from ..core.db import dump_json, get_connection, load_json, utc_now
from ..core.errors import Conflict, NotFound
from ..core.security import hash_password
from ..schemas.client import (
    Address,
    AddressCreate,
    AddressUpdate,
    ClientCreate,
    ClientProfileUpdate,
    ClientRead,
)


logger = logging.getLogger(__name__)


def _row_to_client(row: sqlite3.Row) -> ClientRead:
    return ClientRead(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        phone=row["phone"],
        addresses=load_json(row["addresses"]),
        language=row["language"],
        created_at=row["created_at"],
    )


def _with_single_default(addresses: List[Dict[str, Any]], default_id: Optional[str]) -> List[Dict[str, Any]]:
    """Return ``addresses`` with ``isDefault`` set on ``default_id`` only.

    When no address is flagged, the first one becomes the default.
    """
    if default_id is None:
        default_id = next((a["id"] for a in addresses if a.get("isDefault")), None)
    if default_id is None and addresses:
        default_id = addresses[0]["id"]
    return [{**a, "isDefault": a["id"] == default_id} for a in addresses]


def _new_address(data: AddressCreate) -> Dict[str, Any]:
    return Address(id=uuid.uuid4().hex, **data.model_dump()).model_dump(by_alias=True)


class ClientService:
    """Service for client registration, profile and address book."""

    @classmethod
    async def create_client(cls, data: ClientCreate) -> ClientRead:
        """Insert a new client with a hashed password.

        Raises ``Conflict`` if the e‑mail is already registered as a
        client.  Provider accounts are a separate store and do not
        conflict.
        """
        addresses = [_new_address(a) for a in data.addresses]
        addresses = _with_single_default(addresses, None)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            exists = cursor.execute("SELECT id FROM clients WHERE email = ?", (data.email,)).fetchone()
            if exists:
                raise Conflict("This email is already in use")
            try:
                cursor.execute(
                    "INSERT INTO clients (first_name, last_name, email, phone, password, addresses, language, created_at) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        data.first_name,
                        data.last_name,
                        data.email,
                        data.phone,
                        hash_password(data.password),
                        dump_json(addresses),
                        data.language,
                        utc_now(),
                    ),
                )
            except sqlite3.IntegrityError:
                # A concurrent registration won the unique index.
                raise Conflict("This email is already in use")
            client_id = cursor.lastrowid
            conn.commit()
            logger.info("Registered client %s (%s)", client_id, data.email)
            row = cursor.execute("SELECT * FROM clients WHERE id = ?", (client_id,)).fetchone()
            return _row_to_client(row)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @classmethod
    async def get_client(cls, client_id: int) -> Optional[ClientRead]:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM clients WHERE id = ?", (client_id,)).fetchone()
            return _row_to_client(row) if row else None
        finally:
            conn.close()

    @classmethod
    async def get_credentials(cls, email: str) -> Optional[sqlite3.Row]:
        """Return ``(id, password)`` for ``email`` or ``None``.  Used by login only."""
        conn = get_connection()
        try:
            return conn.execute("SELECT id, password FROM clients WHERE email = ?", (email,)).fetchone()
        finally:
            conn.close()

    @classmethod
    async def update_profile(cls, client_id: int, data: ClientProfileUpdate) -> ClientRead:
        updates = data.model_dump(exclude_none=True)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if updates:
                assignments = ", ".join(f"{field} = ?" for field in updates)
                cursor.execute(
                    f"UPDATE clients SET {assignments} WHERE id = ?",
                    (*updates.values(), client_id),
                )
                conn.commit()
            row = cursor.execute("SELECT * FROM clients WHERE id = ?", (client_id,)).fetchone()
            if not row:
                raise NotFound("Client not found")
            return _row_to_client(row)
        finally:
            conn.close()

    @classmethod
    async def _rewrite_addresses(cls, client_id: int, mutate) -> List[Address]:
        """Load the address list, apply ``mutate`` and store the result.

        ``mutate`` receives the current list and returns
        ``(new_list, default_id)``.  This is a read‑then‑write sequence;
        concurrent edits of the same client's address book are last
        writer wins.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT addresses FROM clients WHERE id = ?", (client_id,)).fetchone()
            if not row:
                raise NotFound("Client not found")
            addresses, default_id = mutate(load_json(row["addresses"]))
            addresses = _with_single_default(addresses, default_id)
            cursor.execute(
                "UPDATE clients SET addresses = ? WHERE id = ?",
                (dump_json(addresses), client_id),
            )
            conn.commit()
            return [Address.model_validate(a) for a in addresses]
        finally:
            conn.close()

    @classmethod
    async def add_address(cls, client_id: int, data: AddressCreate) -> List[Address]:
        address = _new_address(data)

        def mutate(addresses):
            return addresses + [address], address["id"] if address["isDefault"] else None

        return await cls._rewrite_addresses(client_id, mutate)

    @classmethod
    async def update_address(cls, client_id: int, address_id: str, data: AddressUpdate) -> List[Address]:
        changes = data.model_dump(exclude_none=True, by_alias=True)

        def mutate(addresses):
            if not any(a["id"] == address_id for a in addresses):
                raise NotFound("Address not found")
            updated = [{**a, **changes} if a["id"] == address_id else a for a in addresses]
            default_id = address_id if changes.get("isDefault") else None
            if changes.get("isDefault") is False:
                # Unflagging hands the default to the first remaining address.
                updated = [{**a, "isDefault": False} for a in updated]
                others = [a["id"] for a in updated if a["id"] != address_id]
                default_id = others[0] if others else address_id
            return updated, default_id

        return await cls._rewrite_addresses(client_id, mutate)

    @classmethod
    async def delete_address(cls, client_id: int, address_id: str) -> List[Address]:
        def mutate(addresses):
            remaining = [a for a in addresses if a["id"] != address_id]
            if len(remaining) == len(addresses):
                raise NotFound("Address not found")
            return remaining, None

        return await cls._rewrite_addresses(client_id, mutate)
