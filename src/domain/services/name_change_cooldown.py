"""Rename cooldown gate."""

import math
from collections.abc import Callable
from datetime import datetime, timedelta

from domain.entities.display_name import NameChangeStatus
from domain.entities.profile import Profile

Clock = Callable[[], datetime]

DEFAULT_COOLDOWN_HOURS = 24
_SECONDS_PER_HOUR = 3600


def utc_now() -> datetime:
    """Naive UTC timestamp, matching what the database columns store."""
    return datetime.utcnow()


class NameChangeCooldown:
    """Decides whether a profile may rename, based on its last rename time."""

    def __init__(
        self,
        cooldown: timedelta = timedelta(hours=DEFAULT_COOLDOWN_HOURS),
        clock: Clock = utc_now,
    ) -> None:
        self._cooldown = cooldown
        self._clock = clock

    @property
    def cooldown(self) -> timedelta:
        return self._cooldown

    def status(self, profile: Profile, now: datetime | None = None) -> NameChangeStatus:
        """Evaluate the cooldown with exactly one clock read.

        ``remaining_hours`` is rounded up and never exceeds the full window,
        so a ``last_name_change_at`` ahead of the clock is clamped.
        """
        if now is None:
            now = self._clock()
        changed_at = profile.last_name_change_at
        if changed_at is None:
            return NameChangeStatus(can_change=True, remaining_hours=0)

        available_at = changed_at + self._cooldown
        remaining = min(available_at - now, self._cooldown)
        if remaining <= timedelta(0):
            return NameChangeStatus(can_change=True, remaining_hours=0, available_at=available_at)

        hours = math.ceil(remaining.total_seconds() / _SECONDS_PER_HOUR)
        return NameChangeStatus(can_change=False, remaining_hours=hours, available_at=available_at)

    def can_change_name(self, profile: Profile, now: datetime | None = None) -> bool:
        return self.status(profile, now).can_change

    def remaining_cooldown_hours(self, profile: Profile, now: datetime | None = None) -> int:
        return self.status(profile, now).remaining_hours
