"""
Shared schema base and vocabularies.

The mobile clients speak camelCase JSON (``firstName``, ``hourlyRate``)
while Python code uses snake_case attributes.  ``CamelModel`` bridges
the two: fields are declared in snake_case, exposed under camelCase
aliases, and may be populated by either name.
"""

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


Role = Literal["client", "provider"]
Language = Literal["fr", "en", "he", "ar"]
ServiceType = Literal["home", "building", "office", "other"]
JobServiceType = Literal["home", "office", "building"]
PropertyType = Literal["house", "apartment", "office"]
JobStatus = Literal["pending", "accepted", "declined", "completed", "cancelled"]

EMAIL_RE = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.[A-Za-z]{2,}$")
TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

# Largest value a SQLite INTEGER primary key can hold.
MAX_ID = 2**63 - 1


def normalise_email(value: str) -> str:
    """Strip and lowercase an address, raising ``ValueError`` if it is not one."""
    value = value.strip().lower()
    if not EMAIL_RE.match(value):
        raise ValueError("Please provide a valid email")
    return value


class CamelModel(BaseModel):
    """Base model exposing snake_case fields under camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
