"""
Business logic for provider reviews.

A client has at most one review per provider.  The ``reviews`` table
enforces this with ``UNIQUE(provider_id, client_id)`` and submission is
a conditional insert followed, when the pair already exists, by an
in‑place update.  Two concurrent submissions from the same client can
therefore never create a second row; the later write simply wins.
"""

import logging
from typing import Iterable, Tuple

from ..core.db import get_connection, utc_now
from ..core.errors import NotFound
from ..schemas.review import ReviewCreate, ReviewRead


logger = logging.getLogger(__name__)


def average_rating(ratings: Iterable[int]) -> float:
    """Arithmetic mean of ``ratings``; 0 when there are none."""
    ratings = list(ratings)
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


class ReviewService:
    """Service for submitting reviews and keeping provider ratings current."""

    @classmethod
    async def submit_review(
        cls,
        provider_id: int,
        client_id: int,
        data: ReviewCreate,
    ) -> Tuple[ReviewRead, bool]:
        """Create or overwrite the review of ``client_id`` for ``provider_id``.

        Returns the stored review and ``True`` if it was newly created.
        An existing review keeps its id and ``createdAt``; only rating and
        comment change.  Raises ``NotFound`` if the provider does not
        exist.
        """
        comment = data.comment or ""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if not cursor.execute("SELECT id FROM providers WHERE id = ?", (provider_id,)).fetchone():
                raise NotFound("Provider not found")
            cursor.execute(
                """
                INSERT INTO reviews (provider_id, client_id, rating, comment, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(provider_id, client_id) DO NOTHING
                """,
                (provider_id, client_id, data.rating, comment, utc_now()),
            )
            created = cursor.rowcount == 1
            if not created:
                cursor.execute(
                    "UPDATE reviews SET rating = ?, comment = ? WHERE provider_id = ? AND client_id = ?",
                    (data.rating, comment, provider_id, client_id),
                )
            # Keep the stored provider rating in line with the review store.
            cursor.execute(
                """
                UPDATE providers
                SET rating = COALESCE((SELECT AVG(rating) FROM reviews WHERE provider_id = ?), 0)
                WHERE id = ?
                """,
                (provider_id, provider_id),
            )
            conn.commit()
            row = cursor.execute(
                "SELECT * FROM reviews WHERE provider_id = ? AND client_id = ?",
                (provider_id, client_id),
            ).fetchone()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        logger.info(
            "Client %s %s review %s for provider %s (rating %s)",
            client_id,
            "created" if created else "updated",
            row["id"],
            provider_id,
            data.rating,
        )
        return (
            ReviewRead(
                id=row["id"],
                provider=row["provider_id"],
                client=row["client_id"],
                rating=row["rating"],
                comment=row["comment"],
                created_at=row["created_at"],
            ),
            created,
        )

