"""
Provider endpoints for API v1.

``GET /providers`` is public.  Everything else requires a provider
token: profile and availability management, and the job inbox with the
accept/decline/complete transitions.  Jobs are always looked up within
the caller's scope, so a job owned by another provider answers 404.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Path

from cleanconnect_api.app.core.responses import envelope
from cleanconnect_api.app.core.security import require_roles
from cleanconnect_api.app.schemas.common import MAX_ID
from cleanconnect_api.app.schemas.job import JobComplete, JobDecline
from cleanconnect_api.app.schemas.provider import AvailabilityUpdate, ProviderProfileUpdate
from cleanconnect_api.app.services.job_service import JobService
from cleanconnect_api.app.services.provider_service import ProviderService


router = APIRouter()

provider_only = require_roles("provider")


@router.get("", summary="List providers")
async def list_providers() -> dict:
    """List every provider, best rated first."""
    providers = await ProviderService.list_providers()
    return envelope(data=providers, count=len(providers))


@router.get("/profile", summary="Get the provider profile")
async def get_profile(current: dict = Depends(provider_only)) -> dict:
    """Return the caller's profile with its job summaries and reviews."""
    profile = await ProviderService.get_profile(current["id"])
    return envelope(data=profile)


@router.put("/profile", summary="Update the provider profile")
async def update_profile(
    data: ProviderProfileUpdate,
    current: dict = Depends(provider_only),
) -> dict:
    """Update whitelisted profile fields; unknown fields are ignored."""
    provider = await ProviderService.update_profile(current["id"], data)
    return envelope(data=provider, message="Profile updated")


@router.put("/availability", summary="Replace weekly availability")
async def update_availability(
    data: AvailabilityUpdate,
    current: dict = Depends(provider_only),
) -> dict:
    slots = await ProviderService.update_availability(current["id"], data)
    return envelope(data=slots, message="Availability updated")


@router.get("/jobs", summary="List the provider's jobs")
async def list_jobs(current: dict = Depends(provider_only)) -> dict:
    jobs = await JobService.list_jobs(current["id"])
    return envelope(data=jobs, count=len(jobs))


@router.get("/jobs/{job_id}", summary="Get a job")
async def get_job(
    job_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the job"),
    current: dict = Depends(provider_only),
) -> dict:
    job = await JobService.get_job(job_id, current["id"])
    return envelope(data=job)


@router.put("/jobs/{job_id}/accept", summary="Accept a job")
async def accept_job(
    job_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the job to accept"),
    current: dict = Depends(provider_only),
) -> dict:
    job = await JobService.accept_job(job_id, current["id"])
    return envelope(data=job, message="Job accepted")


@router.put("/jobs/{job_id}/decline", summary="Decline a job")
async def decline_job(
    job_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the job to decline"),
    data: Optional[JobDecline] = Body(None),
    current: dict = Depends(provider_only),
) -> dict:
    """Decline a job.  ``reason`` defaults to "Not specified"."""
    job = await JobService.decline_job(job_id, current["id"], data.reason if data else None)
    return envelope(data=job, message="Job declined")


@router.put("/jobs/{job_id}/complete", summary="Complete a job")
async def complete_job(
    job_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the job to complete"),
    data: Optional[JobComplete] = Body(None),
    current: dict = Depends(provider_only),
) -> dict:
    job = await JobService.complete_job(job_id, current["id"], data.notes if data else None)
    return envelope(data=job, message="Job completed")
