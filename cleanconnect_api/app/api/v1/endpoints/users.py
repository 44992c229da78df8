"""
Client profile and address book endpoints for API v1.

All routes require a client token.  Address operations return the
client's full, updated address list.
"""

from fastapi import APIRouter, Depends, Path, status

from cleanconnect_api.app.core.responses import envelope
from cleanconnect_api.app.core.security import require_roles
from cleanconnect_api.app.schemas.client import AddressCreate, AddressUpdate, ClientProfileUpdate
from cleanconnect_api.app.services.client_service import ClientService


router = APIRouter()

client_only = require_roles("client")


@router.get("/profile", summary="Get the client profile")
async def get_profile(current: dict = Depends(client_only)) -> dict:
    return envelope(data=current["identity"])


@router.put("/profile", summary="Update the client profile")
async def update_profile(
    data: ClientProfileUpdate,
    current: dict = Depends(client_only),
) -> dict:
    """Update ``firstName``, ``lastName``, ``phone`` or ``language``."""
    client = await ClientService.update_profile(current["id"], data)
    return envelope(data=client, message="Profile updated")


@router.post("/addresses", status_code=status.HTTP_201_CREATED, summary="Add an address")
async def add_address(
    data: AddressCreate,
    current: dict = Depends(client_only),
) -> dict:
    """Append an address.  The first address becomes the default."""
    addresses = await ClientService.add_address(current["id"], data)
    return envelope(data=addresses, message="Address added")


@router.put("/addresses/{address_id}", summary="Update an address")
async def update_address(
    data: AddressUpdate,
    address_id: str = Path(..., description="ID of the address to edit"),
    current: dict = Depends(client_only),
) -> dict:
    addresses = await ClientService.update_address(current["id"], address_id, data)
    return envelope(data=addresses, message="Address updated")


@router.delete("/addresses/{address_id}", summary="Remove an address")
async def delete_address(
    address_id: str = Path(..., description="ID of the address to remove"),
    current: dict = Depends(client_only),
) -> dict:
    addresses = await ClientService.delete_address(current["id"], address_id)
    return envelope(data=addresses, message="Address removed")
