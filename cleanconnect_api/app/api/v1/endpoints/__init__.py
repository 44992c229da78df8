"""
Endpoint modules for API v1.

Each module defines an ``APIRouter`` for one area (auth, users,
providers, public catalog, bookings); ``router.py`` aggregates them.
"""
