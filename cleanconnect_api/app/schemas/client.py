"""
Pydantic models for client identities.

Clients register with contact details and an optional list of
addresses.  Each stored address gets a generated ``id`` so it can be
edited or removed through the address endpoints.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator

from .common import CamelModel, Language, normalise_email


class AddressBase(CamelModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = "Israel"
    is_default: bool = False


class AddressCreate(AddressBase):
    """Schema for adding an address."""


class AddressUpdate(CamelModel):
    """Partial address update; omitted fields keep their stored value."""

    street: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    zip_code: Optional[str] = Field(None, min_length=1)
    country: Optional[str] = None
    is_default: Optional[bool] = None


class Address(AddressBase):
    id: str


class ClientCreate(CamelModel):
    """Schema for registering a client."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    addresses: List[AddressCreate] = Field(default_factory=list)
    language: Language = "he"

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalise_email(v)


class ClientProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    language: Optional[Language] = None


class ClientRead(CamelModel):
    """Safe projection of a client; never carries the password hash."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    addresses: List[Address] = Field(default_factory=list)
    language: Language = "he"
    role: Literal["client"] = "client"
    created_at: datetime
