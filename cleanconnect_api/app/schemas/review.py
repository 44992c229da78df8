"""
Pydantic schemas for provider reviews.

A client leaves at most one review per provider; submitting again
overwrites the rating and comment of the existing review.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import CamelModel


class ReviewCreate(CamelModel):
    """Schema for submitting a review."""

    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, description="Optional textual comment")

    @field_validator("comment")
    @classmethod
    def sanitize_comment(cls, v: Optional[str]) -> Optional[str]:
        """Trim whitespace from the comment and enforce a maximum length."""
        if v is None:
            return None
        v = v.strip()
        if len(v) > 1000:
            raise ValueError("Comment must be 1000 characters or fewer")
        return v


class ReviewRead(CamelModel):
    id: int
    provider: int
    client: int
    rating: int
    comment: str
    created_at: datetime
