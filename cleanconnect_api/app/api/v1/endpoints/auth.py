"""
Authentication endpoints for API v1.

Clients and providers register through separate routes but share one
login route.  Every successful call returns a bearer token that binds
the identity id and its role.
"""

from fastapi import APIRouter, Depends, status

from cleanconnect_api.app.core.responses import envelope
from cleanconnect_api.app.core.security import get_current_identity
from cleanconnect_api.app.schemas.auth import LoginRequest
from cleanconnect_api.app.schemas.client import ClientCreate
from cleanconnect_api.app.schemas.provider import ProviderCreate
from cleanconnect_api.app.services.identity_service import IdentityService


router = APIRouter()

_USER_FIELDS = {"id", "first_name", "last_name", "email", "role"}


@router.post("/register/client", status_code=status.HTTP_201_CREATED, summary="Register a client")
async def register_client(data: ClientCreate) -> dict:
    """Register a client and return a token.

    A second registration with an e‑mail already present in the client
    store is rejected with 400; the provider store is not consulted.
    """
    client, token = await IdentityService.register(data)
    user = client.model_dump(mode="json", by_alias=True, include=_USER_FIELDS | {"language"})
    return envelope(token=token, user=user)


@router.post("/register/provider", status_code=status.HTTP_201_CREATED, summary="Register a provider")
async def register_provider(data: ProviderCreate) -> dict:
    """Register a provider and return a token."""
    provider, token = await IdentityService.register(data)
    projection = provider.model_dump(
        mode="json",
        by_alias=True,
        include=_USER_FIELDS | {"language", "service_types"},
    )
    return envelope(token=token, provider=projection)


@router.post("/login", summary="Log in as a client or provider")
async def login(data: LoginRequest) -> dict:
    """Authenticate a client or provider.

    ``role`` restricts the lookup to one store.  Without it the client
    store is searched before the provider store.  Unknown e‑mail and
    wrong password produce the same 401 response.
    """
    identity, token = await IdentityService.login(data.email, data.password, data.role)
    user = identity.model_dump(mode="json", by_alias=True, include=_USER_FIELDS)
    return envelope(token=token, user=user)


@router.get("/me", summary="Get the current identity")
async def me(current: dict = Depends(get_current_identity)) -> dict:
    """Return the identity behind the bearer token."""
    return envelope(data=current["identity"])
