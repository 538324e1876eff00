"""Display name validation value objects and policy constants."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 20  # Presentation layers bound their input fields with this
ALLOWED_PUNCTUATION = "_-.'"

DEFAULT_BANNED_WORDS: frozenset[str] = frozenset(
    {
        "admin",
        "administrator",
        "moderator",
        "mod",
        "staff",
        "support",
        "official",
        "system",
        "root",
        "null",
        "undefined",
    }
)


class DisplayNameError(StrEnum):
    """Closed set of reasons a display name can be rejected."""

    EMPTY = "empty"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    INVALID_CHARS = "invalid_chars"
    BANNED_WORD = "banned_word"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Read-only outcome of validating one candidate name."""

    is_valid: bool
    error: DisplayNameError | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, error: DisplayNameError) -> "ValidationResult":
        return cls(is_valid=False, error=error)


@dataclass(frozen=True, slots=True)
class NameChangeStatus:
    """Cooldown state of a profile, computed from a single clock read."""

    can_change: bool
    remaining_hours: int
    available_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class NamePolicy:
    """Limits a presentation layer needs to mirror the validation rules."""

    min_length: int
    max_length: int
    allowed_punctuation: str
    cooldown_hours: int
