"""
Booking endpoints for API v1.

These routes are placeholders kept for the mobile app: they answer
with fixed payloads and do not touch the job ledger.  Jobs are recorded
through ``JobService.create_job``.
"""

from fastapi import APIRouter, Depends, Path, status

from cleanconnect_api.app.core.responses import envelope
from cleanconnect_api.app.core.security import get_current_identity, require_roles


router = APIRouter()

client_only = require_roles("client")


@router.get("/search-providers", summary="Search providers for a booking")
async def search_providers(current: dict = Depends(client_only)) -> dict:
    return envelope(data=[], message="Available providers")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a booking")
async def create_booking(current: dict = Depends(client_only)) -> dict:
    return envelope(data={"id": "temp-booking-id", "status": "pending"}, message="Booking created")


# Declared before "/{booking_id}" so that "client" is not read as an id.
@router.get("/client", summary="List the client's bookings")
async def list_client_bookings(current: dict = Depends(client_only)) -> dict:
    return envelope(data=[], message="Client bookings retrieved")


@router.get("/{booking_id}", summary="Get a booking")
async def get_booking(
    booking_id: str = Path(..., description="ID of the booking"),
    current: dict = Depends(get_current_identity),
) -> dict:
    return envelope(data={"id": booking_id, "status": "pending"}, message="Booking details retrieved")


@router.put("/{booking_id}/cancel", summary="Cancel a booking")
async def cancel_booking(
    booking_id: str = Path(..., description="ID of the booking to cancel"),
    current: dict = Depends(get_current_identity),
) -> dict:
    return envelope(message="Booking cancelled")


@router.post("/{booking_id}/review", status_code=status.HTTP_201_CREATED, summary="Review a booking")
async def review_booking(
    booking_id: str = Path(..., description="ID of the reviewed booking"),
    current: dict = Depends(client_only),
) -> dict:
    return envelope(message="Review added")
