"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by user ID."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    async def update(self, profile: Profile, expected_version: int) -> Profile | None:
        """Write the profile if its stored version still equals ``expected_version``.

        Returns the stored profile with its bumped version, or None when another
        writer got there first.
        """
        ...
