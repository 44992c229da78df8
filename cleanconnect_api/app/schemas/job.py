"""
Pydantic models for job requests.

A job links a client and a provider and carries a single ``status``
field.  Providers move it with the accept/decline/complete endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import CamelModel, JobServiceType, JobStatus, PropertyType


class JobCreate(CamelModel):
    """Payload for recording a new job.

    ``price`` may be omitted when ``hours`` is given; the price is then
    computed from the provider's rate for ``serviceType``.
    """

    service_type: JobServiceType
    property_type: PropertyType
    scheduled_date: datetime
    address: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    hours: Optional[float] = Field(None, gt=0)


class JobDecline(CamelModel):
    reason: Optional[str] = None


class JobComplete(CamelModel):
    notes: Optional[str] = None


class JobClient(CamelModel):
    """Client contact details embedded in a job."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    addresses: Optional[List[dict]] = None


class JobRead(CamelModel):
    id: int
    client: Optional[JobClient] = None
    provider: int
    service_type: str
    property_type: str
    status: JobStatus
    scheduled_date: datetime
    address: str
    description: Optional[str] = None
    price: Optional[float] = None
    decline_reason: Optional[str] = None
    completion_notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: datetime


class JobSummary(CamelModel):
    id: int
    status: JobStatus
    service_type: str
    date: datetime
    client_name: str
