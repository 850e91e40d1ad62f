"""
Header-based identity for local use.

The bearer token is taken as the user id, so each caller only sees its own
tasks, events and blocks. No credentials are checked.
"""

import re

from app.core.exceptions import AuthenticationError
from app.interfaces.auth_provider import IAuthProvider, User

_USER_ID = re.compile(r"^[A-Za-z0-9_.@+-]{1,255}$")


class MockAuthProvider(IAuthProvider):
    """Resolves "Bearer <user_id>" to a User without verification."""

    def __init__(self, enabled: bool = False):
        self._enabled = enabled

    async def verify_token(self, token: str) -> User:
        if not _USER_ID.match(token):
            raise AuthenticationError("Token is not a valid user id")
        email = token if "@" in token else f"{token}@example.com"
        return User(id=token, email=email, display_name=token.split("@")[0])

    def is_enabled(self) -> bool:
        return self._enabled
