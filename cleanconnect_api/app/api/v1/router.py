"""
Top‑level router for version 1 of the API.

Aggregates the domain routers under their prefixes.  ``main`` mounts
this router under ``/api/v1``.
"""

from fastapi import APIRouter

from .endpoints import auth, bookings, providers, public_providers, users

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(providers.router, prefix="/providers", tags=["providers"])
router.include_router(public_providers.router, prefix="/public/providers", tags=["catalog"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
