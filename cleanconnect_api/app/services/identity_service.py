"""
Authentication shared by both identity kinds.

Clients and providers live in separate stores with independent e‑mail
uniqueness, but registration, login and token issuance follow one
contract.  ``IdentityService`` dispatches on the role tag to the
matching store service and keeps the contract in one place.
"""

import logging
from typing import Optional, Tuple, Union

from ..core.errors import AuthenticationFailed, ValidationFailed
from ..core.security import create_access_token, verify_password
from ..schemas.client import ClientCreate, ClientRead
from ..schemas.common import normalise_email
from ..schemas.provider import ProviderCreate, ProviderRead
from .client_service import ClientService
from .provider_service import ProviderService


logger = logging.getLogger(__name__)

Identity = Union[ClientRead, ProviderRead]

# Store lookup order when a login does not name a role.
STORES = {
    "client": ClientService,
    "provider": ProviderService,
}

INVALID_CREDENTIALS = "Invalid credentials"


class IdentityService:
    """Role‑dispatched registration, login and identity lookup."""

    @classmethod
    async def get_identity(cls, role: str, identity_id: int) -> Optional[Identity]:
        if role == "client":
            return await ClientService.get_client(identity_id)
        if role == "provider":
            return await ProviderService.get_provider(identity_id)
        return None

    @classmethod
    async def register(cls, data: Union[ClientCreate, ProviderCreate]) -> Tuple[Identity, str]:
        """Persist a new identity and return it with a fresh token."""
        if isinstance(data, ClientCreate):
            identity = await ClientService.create_client(data)
        else:
            identity = await ProviderService.create_provider(data)
        return identity, create_access_token(identity.id, identity.role)

    @classmethod
    async def login(
        cls,
        email: Optional[str],
        password: Optional[str],
        role: Optional[str] = None,
    ) -> Tuple[Identity, str]:
        """Verify credentials and issue a token.

        With ``role`` set only that store is searched; otherwise the
        client store is searched first, then the provider store.  Unknown
        e‑mail and wrong password raise the same ``AuthenticationFailed``
        so callers cannot tell which one failed.
        """
        if not email or not password:
            raise ValidationFailed("Please provide an email and a password")
        try:
            email = normalise_email(email)
        except ValueError:
            raise AuthenticationFailed(INVALID_CREDENTIALS)

        roles = [role] if role else list(STORES)
        found_role, credentials = None, None
        for candidate in roles:
            credentials = await STORES[candidate].get_credentials(email)
            if credentials:
                found_role = candidate
                break

        if not credentials or not verify_password(password, credentials["password"]):
            logger.info("Failed login for %s (role hint: %s)", email, role or "none")
            raise AuthenticationFailed(INVALID_CREDENTIALS)

        identity = await cls.get_identity(found_role, credentials["id"])
        if identity is None:
            raise AuthenticationFailed(INVALID_CREDENTIALS)
        logger.info("%s %s logged in", found_role.capitalize(), identity.id)
        return identity, create_access_token(identity.id, found_role)
