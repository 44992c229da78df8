"""
Pydantic models for provider identities and the provider catalog.

A provider advertises service types, per‑type rates (``serviceDetails``),
service areas and weekly availability slots.  ``hourlyRate`` is derived
from the service details whenever they are present; see
``services.provider_service.average_hourly_rate``.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from .common import TIME_RE, CamelModel, Language, ServiceType, normalise_email
from .job import JobSummary


class ServiceDetail(CamelModel):
    type: ServiceType
    hourly_rate: float = Field(..., ge=0)
    description: str = ""


class AvailabilitySlot(CamelModel):
    """A weekly slot.  ``day`` is 0 (Sunday) to 6 (Saturday)."""

    day: int = Field(..., ge=0, le=6)
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time(cls, v: str) -> str:
        if not TIME_RE.match(v):
            raise ValueError("Time must use the HH:MM format")
        return v

    @model_validator(mode="after")
    def check_order(self) -> "AvailabilitySlot":
        if self.end_time <= self.start_time:
            raise ValueError("endTime must be after startTime")
        return self


class ProviderCreate(CamelModel):
    """Schema for registering a provider."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    service_types: List[ServiceType] = Field(..., min_length=1)
    service_areas: List[str] = Field(..., min_length=1)
    hourly_rate: float = Field(..., ge=0)
    service_details: List[ServiceDetail] = Field(default_factory=list)
    language: Language = "he"

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalise_email(v)


class ProviderProfileUpdate(CamelModel):
    """Whitelisted profile fields.  Anything else in the body is ignored."""

    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    bio: Optional[str] = None
    service_types: Optional[List[ServiceType]] = None
    service_details: Optional[List[ServiceDetail]] = None
    service_areas: Optional[List[str]] = None
    availability: Optional[List[AvailabilitySlot]] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    language: Optional[Language] = None
    experience: Optional[int] = Field(None, ge=0)
    certifications: Optional[List[str]] = None
    profile_image: Optional[str] = None


class AvailabilityUpdate(CamelModel):
    availability: Optional[List[AvailabilitySlot]] = None


class ProviderRead(CamelModel):
    """Safe projection of a provider; never carries the password hash."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    service_types: List[ServiceType] = Field(default_factory=list)
    service_details: List[ServiceDetail] = Field(default_factory=list)
    service_areas: List[str] = Field(default_factory=list)
    hourly_rate: float = 0
    availability: List[AvailabilitySlot] = Field(default_factory=list)
    rating: float = 0
    language: Language = "he"
    profile_image: str = ""
    bio: str = ""
    experience: int = 0
    certifications: List[str] = Field(default_factory=list)
    role: Literal["provider"] = "provider"
    created_at: datetime


class ProviderListItem(ProviderRead):
    """Entry of ``GET /providers``; ``serviceCities`` mirrors ``serviceAreas``."""

    service_cities: List[str] = Field(default_factory=list)


class ReviewerInfo(CamelModel):
    id: Optional[int] = None
    name: str
    profile_picture: Optional[str] = None


class ProviderReview(CamelModel):
    id: int
    rating: int
    comment: str
    date: datetime
    client: ReviewerInfo


class ProfileReview(CamelModel):
    id: int
    rating: int
    comment: str
    date: datetime
    client_name: str


class CatalogEntry(ProviderRead):
    average_rating: float = 0
    review_count: int = 0


class ProviderDetail(CatalogEntry):
    reviews: List[ProviderReview] = Field(default_factory=list)


class ProviderProfile(ProviderRead):
    requests: List[JobSummary] = Field(default_factory=list)
    reviews: List[ProfileReview] = Field(default_factory=list)
