"""
Public provider catalog.

The catalog lists providers filtered by service type, service area and
minimum average rating.  Average ratings come from the review store and
are computed in the same query that fetches the providers (one grouped
``LEFT JOIN``), so the listing costs a single round trip whatever the
number of providers.
"""

import logging
from typing import List, Optional

from ..core.db import get_connection
from ..core.errors import NotFound
from ..schemas.provider import CatalogEntry, ProviderDetail, ProviderReview, ReviewerInfo
from .provider_service import row_to_provider
from .review_service import average_rating


logger = logging.getLogger(__name__)

# Accepted filter spellings, including the French names used by the
# first mobile release, mapped to the stored vocabulary.
SERVICE_TYPE_VOCABULARY = {
    "home": "home",
    "building": "building",
    "office": "office",
    "other": "other",
    "maison": "home",
    "immeuble": "building",
    "bureau": "office",
    "autre": "other",
}


def map_service_type(value: str) -> str:
    """Translate a filter value to the stored vocabulary; unknown values pass through."""
    return SERVICE_TYPE_VOCABULARY.get(value.strip().lower(), value)


class CatalogService:
    """Read‑only queries behind ``/public/providers``."""

    @classmethod
    async def search_providers(
        cls,
        service_type: Optional[str] = None,
        service_area: Optional[str] = None,
        min_rating: Optional[float] = None,
    ) -> List[CatalogEntry]:
        """Return matching providers sorted by descending average rating.

        ``service_type`` matches either the provider's ``serviceTypes`` or
        the type of any of its ``serviceDetails``.  ``min_rating`` is
        inclusive.  Providers without reviews have an average of 0.
        """
        where: List[str] = []
        params: list = []
        if service_type:
            mapped = map_service_type(service_type)
            where.append(
                "(EXISTS (SELECT 1 FROM json_each(p.service_types) AS st WHERE st.value = ?)"
                " OR EXISTS (SELECT 1 FROM json_each(p.service_details) AS sd"
                " WHERE json_extract(sd.value, '$.type') = ?))"
            )
            params.extend([mapped, mapped])
        if service_area:
            where.append("EXISTS (SELECT 1 FROM json_each(p.service_areas) AS sa WHERE sa.value = ?)")
            params.append(service_area)

        query = (
            "SELECT p.*, COUNT(r.id) AS review_count, COALESCE(AVG(r.rating), 0) AS average_rating "
            "FROM providers p LEFT JOIN reviews r ON r.provider_id = p.id"
        )
        if where:
            query += " WHERE " + " AND ".join(where)
        query += " GROUP BY p.id"
        if min_rating is not None:
            query += " HAVING COALESCE(AVG(r.rating), 0) >= ?"
            params.append(min_rating)
        query += " ORDER BY average_rating DESC, p.id ASC"

        conn = get_connection()
        try:
            rows = conn.execute(query, tuple(params)).fetchall()
        finally:
            conn.close()
        logger.debug(
            "Catalog search type=%s area=%s min_rating=%s -> %d providers",
            service_type,
            service_area,
            min_rating,
            len(rows),
        )
        return [
            CatalogEntry(
                **row_to_provider(row).model_dump(),
                average_rating=row["average_rating"],
                review_count=row["review_count"],
            )
            for row in rows
        ]

    @classmethod
    async def get_provider_details(cls, provider_id: int) -> ProviderDetail:
        """Provider projection with all its reviews and their authors."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            row = cursor.execute("SELECT * FROM providers WHERE id = ?", (provider_id,)).fetchone()
            if not row:
                raise NotFound("Provider not found")
            reviews = cursor.execute(
                """
                SELECT r.id, r.rating, r.comment, r.created_at,
                       c.id AS c_id, c.first_name, c.last_name
                FROM reviews r LEFT JOIN clients c ON c.id = r.client_id
                WHERE r.provider_id = ?
                ORDER BY r.created_at DESC, r.id DESC
                """,
                (provider_id,),
            ).fetchall()
        finally:
            conn.close()

        formatted = []
        for r in reviews:
            if r["c_id"] is None:
                reviewer = ReviewerInfo(name="Anonymous client")
            else:
                reviewer = ReviewerInfo(id=r["c_id"], name=f"{r['first_name']} {r['last_name']}")
            formatted.append(
                ProviderReview(
                    id=r["id"],
                    rating=r["rating"],
                    comment=r["comment"],
                    date=r["created_at"],
                    client=reviewer,
                )
            )
        return ProviderDetail(
            **row_to_provider(row).model_dump(),
            reviews=formatted,
            average_rating=average_rating(r["rating"] for r in reviews),
            review_count=len(reviews),
        )
