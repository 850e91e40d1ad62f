"""
Authentication provider interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """Authenticated user identity."""

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class IAuthProvider(ABC):
    """Abstract interface for request authentication."""

    @abstractmethod
    async def verify_token(self, token: str) -> User:
        """Resolve a bearer token to a user."""
        pass

    @abstractmethod
    def is_enabled(self) -> bool:
        """Whether requests must carry a token."""
        pass
