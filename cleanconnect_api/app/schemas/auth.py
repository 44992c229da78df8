"""Request bodies for authentication."""

from typing import Optional

from .common import CamelModel, Role


class LoginRequest(CamelModel):
    """Login payload.

    ``email`` and ``password`` are optional at the schema level so the
    endpoint can answer a missing value with its own 400 message.
    ``role`` narrows the search to one identity store.
    """

    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[Role] = None
