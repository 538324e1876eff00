"""Display name validation rules."""

import re
import unicodedata
from collections.abc import Iterable

from domain.entities.display_name import (
    ALLOWED_PUNCTUATION,
    DEFAULT_BANNED_WORDS,
    MAX_NAME_LENGTH,
    MIN_NAME_LENGTH,
    DisplayNameError,
    ValidationResult,
)

_WORD_SEPARATORS = re.compile(rf"[ {re.escape(ALLOWED_PUNCTUATION)}]+")


def normalize_display_name(candidate: str) -> str:
    """Trim and NFC-compose a candidate; the form that is validated and stored."""
    return unicodedata.normalize("NFC", candidate.strip())


def _is_allowed_char(char: str) -> bool:
    return char.isalpha() or char.isdecimal() or char == " " or char in ALLOWED_PUNCTUATION


class DisplayNameValidator:
    """Checks candidate display names against syntax and policy rules.

    Stateless after construction, so one instance can be shared across
    concurrent requests.
    """

    def __init__(
        self,
        banned_words: Iterable[str] | None = None,
        min_length: int = MIN_NAME_LENGTH,
        max_length: int = MAX_NAME_LENGTH,
    ) -> None:
        words = DEFAULT_BANNED_WORDS if banned_words is None else banned_words
        self._banned_words = frozenset(word.strip().casefold() for word in words if word.strip())
        self._min_length = min_length
        self._max_length = max_length

    @property
    def min_length(self) -> int:
        return self._min_length

    @property
    def max_length(self) -> int:
        return self._max_length

    def validate(self, candidate: str) -> ValidationResult:
        """Validate a candidate, stopping at the first failing rule.

        Rules run in order: empty, too short, too long, invalid characters,
        banned word. Length is measured on the trimmed, NFC-composed value.
        """
        name = normalize_display_name(candidate)
        if not name:
            return ValidationResult.fail(DisplayNameError.EMPTY)
        if len(name) < self._min_length:
            return ValidationResult.fail(DisplayNameError.TOO_SHORT)
        if len(name) > self._max_length:
            return ValidationResult.fail(DisplayNameError.TOO_LONG)
        if not all(_is_allowed_char(char) for char in name):
            return ValidationResult.fail(DisplayNameError.INVALID_CHARS)
        if self._contains_banned_word(name):
            return ValidationResult.fail(DisplayNameError.BANNED_WORD)
        return ValidationResult.ok()

    def _contains_banned_word(self, name: str) -> bool:
        lowered = name.casefold()
        words = [word for word in _WORD_SEPARATORS.split(lowered) if word]
        # "Ad Min" and "ad_min" collapse to "admin"
        collapsed = "".join(words)
        return collapsed in self._banned_words or any(
            word in self._banned_words for word in words
        )
