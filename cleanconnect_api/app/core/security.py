"""
Security helpers for password hashing and JWT authentication.

Passwords are hashed with ``bcrypt`` (salted, irreversible).  Access
tokens are signed JWTs produced by ``python-jose``; the payload binds
the identity id and its role (``client`` or ``provider``) and carries an
``exp`` claim derived from ``settings.access_token_expire_minutes``.

Two FastAPI dependencies implement the auth gate:

* ``get_current_identity`` verifies the bearer token and resolves the
  subject against the store matching its role.
* ``require_roles`` wraps it and rejects callers whose role is not in
  the allowed set.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from .config import settings
from .errors import PermissionDenied


logger = logging.getLogger(__name__)

ROLES = ("client", "provider")


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt and return it as text."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check a plain password against a stored bcrypt hash.

    Returns ``False`` for a missing or malformed hash instead of raising,
    so callers can treat every failure as "invalid credentials".
    """
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(identity_id: int, role: str, expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT binding ``identity_id`` and ``role``.

    Parameters
    ----------
    identity_id : int
        Primary key of the client or provider.
    role : str
        ``"client"`` or ``"provider"``; selects the store the auth gate
        searches when the token is presented.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.

    Returns
    -------
    str
        The encoded token.
    """
    if role not in ROLES:
        raise ValueError(f"Unknown role {role!r}")
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    claims = {"id": identity_id, "role": role, "exp": int(time.time()) + exp_seconds}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify signature and expiry of ``token``.

    Returns the claims on success, ``None`` if the token is malformed,
    tampered with, expired or lacks the ``id``/``role`` claims.
    """
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        logger.debug("Rejected token: %s", exc)
        return None
    if claims.get("id") is None or claims.get("role") not in ROLES:
        return None
    return claims


security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Dict[str, Any]:
    """Dependency that resolves the caller behind a bearer token.

    Returns a dict with ``id``, ``role`` and ``identity`` (the safe
    projection of the client or provider record).  Raises 401 when the
    header is missing, the token does not verify, or the identity no
    longer exists.
    """
    if credentials is None:
        raise _unauthorized("Not authorized to access this route")
    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Not authorized to access this route")

    # Imported here to keep core free of import cycles with the services.
    from cleanconnect_api.app.services.identity_service import IdentityService

    identity = await IdentityService.get_identity(payload["role"], int(payload["id"]))
    if identity is None:
        raise _unauthorized("User not found")
    return {"id": identity.id, "role": payload["role"], "identity": identity}


def require_roles(*roles: str) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    """Dependency factory enforcing that the caller holds one of ``roles``.

    Use it via ``Depends(require_roles("provider"))``.  Unauthenticated
    callers get 401 from ``get_current_identity``; authenticated callers
    with another role get 403.
    """

    def _role_dependency(current: Dict[str, Any] = Depends(get_current_identity)) -> Dict[str, Any]:
        if current.get("role") not in roles:
            raise PermissionDenied(f"Role {current.get('role')} is not allowed to access this route")
        return current

    return _role_dependency
