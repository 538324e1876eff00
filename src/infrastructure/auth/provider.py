"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass(frozen=True)
class TokenUser:
    """Represents a user extracted from an auth token.

    ``display_name`` is only a seed for a brand new profile; the stored
    profile is the source of truth afterwards.
    """

    id: UUID
    email: str
    display_name: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the token's user, or None if the token is invalid."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Create an authentication token for a user."""
        ...
