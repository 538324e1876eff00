"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Profile:
    """Domain entity for user profile (synced from Supabase).

    ``id`` is the auth subject and never changes. ``display_name`` is only ever
    written with a value that passed ``DisplayNameValidator``.
    ``last_name_change_at`` moves only when a rename is committed.
    """

    id: UUID = field(default_factory=uuid4)
    email: str = ""
    display_name: str | None = None
    avatar_url: str | None = None
    last_name_change_at: datetime | None = None
    version: int = 1
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def user_id(self) -> str:
        """Opaque, copyable identifier shown to the user."""
        return str(self.id)
