"""Profile service layer: display name validation, cooldown and rename."""

import asyncio
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import structlog

from core.exceptions import (
    InvalidDisplayNameError,
    NameChangeCooldownError,
    ProfileNotFoundError,
    ProfileUpdateConflictError,
    StorageFailureError,
)
from core.locks import KeyedLock
from domain.entities.display_name import (
    ALLOWED_PUNCTUATION,
    NameChangeStatus,
    NamePolicy,
    ValidationResult,
)
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.display_name_validator import DisplayNameValidator, normalize_display_name
from domain.services.name_change_cooldown import Clock, NameChangeCooldown, utc_now

logger = structlog.get_logger()

DEFAULT_SAVE_TIMEOUT_SECONDS = 5.0


class ProfileService:
    """Service layer for profile business logic.

    Collaborators are injected so the service holds no process-wide state
    beyond its own per-user lock registry.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        validator: DisplayNameValidator | None = None,
        cooldown: NameChangeCooldown | None = None,
        clock: Clock = utc_now,
        save_timeout: float = DEFAULT_SAVE_TIMEOUT_SECONDS,
        locks: KeyedLock | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._validator = validator or DisplayNameValidator()
        self._clock = clock
        self._cooldown = cooldown or NameChangeCooldown(clock=clock)
        self._save_timeout = save_timeout
        self._locks = locks or KeyedLock()

    # --- Reads ---

    async def get_profile(self, user_id: UUID) -> Profile:
        """Get the current profile for a user."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))
            return profile

    async def initialize_profile(
        self,
        user_id: UUID,
        email: str,
        display_name: str | None = None,
    ) -> Profile:
        """Load the user's profile, creating it on first access.

        A display name from the auth provider seeds the new profile only when
        it passes validation. Seeding does not start a cooldown.
        """
        async with self._locks.acquire(user_id):
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get(user_id)
                if profile:
                    return profile

                seed = None
                if display_name and self._validator.validate(display_name).is_valid:
                    seed = normalize_display_name(display_name)

                created = await uow.profiles.create(
                    Profile(id=user_id, email=email, display_name=seed)
                )
                await uow.commit()
                logger.info("profile_created", user_id=str(user_id), seeded_name=seed is not None)
                return created

    def validate(self, candidate: str) -> ValidationResult:
        """Check a candidate display name without touching storage."""
        return self._validator.validate(candidate)

    def get_name_policy(self) -> NamePolicy:
        """Expose the limits the validator and cooldown enforce."""
        return NamePolicy(
            min_length=self._validator.min_length,
            max_length=self._validator.max_length,
            allowed_punctuation=ALLOWED_PUNCTUATION,
            cooldown_hours=int(self._cooldown.cooldown.total_seconds() // 3600),
        )

    async def get_name_change_status(self, user_id: UUID) -> NameChangeStatus:
        """Cooldown state for a user, evaluated against one clock read."""
        profile = await self.get_profile(user_id)
        return self.evaluate_name_change(profile)

    def evaluate_name_change(self, profile: Profile) -> NameChangeStatus:
        """Cooldown state for an already loaded profile."""
        return self._cooldown.status(profile, self._clock())

    async def can_change_name(self, user_id: UUID) -> bool:
        return (await self.get_name_change_status(user_id)).can_change

    async def remaining_cooldown_hours(self, user_id: UUID) -> int:
        return (await self.get_name_change_status(user_id)).remaining_hours

    # --- Writes ---

    async def update_display_name(self, user_id: UUID, candidate: str) -> Profile:
        """Validate, check the cooldown and persist a new display name.

        Updates for the same user are serialized. Each attempt validates the
        candidate itself and reads the clock only once it holds the lock, so a
        queued second attempt sees the cooldown started by the first one.

        Raises:
            InvalidDisplayNameError: candidate breaks a naming rule
            NameChangeCooldownError: the previous rename is too recent
            ProfileNotFoundError: no profile for ``user_id``
            ProfileUpdateConflictError: another process wrote the profile first
            StorageFailureError: the write failed or exceeded the save timeout
        """
        self._ensure_valid(user_id, candidate)
        name = normalize_display_name(candidate)

        async with self._locks.acquire(user_id):
            try:
                updated = await asyncio.wait_for(
                    self._apply_rename(user_id, name),
                    timeout=self._save_timeout,
                )
            except asyncio.TimeoutError as exc:
                logger.warning(
                    "profile_storage_failure",
                    user_id=str(user_id),
                    error="timeout",
                    timeout_seconds=self._save_timeout,
                )
                raise StorageFailureError("Saving the profile timed out, please try again") from exc
            except StorageFailureError as exc:
                logger.warning(
                    "profile_storage_failure", user_id=str(user_id), error=str(exc.__cause__ or exc.message)
                )
                raise

        logger.info("display_name_updated", user_id=str(user_id), version=updated.version)
        return updated

    async def _apply_rename(self, user_id: UUID, name: str) -> Profile:
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(user_id)
            if not profile:
                raise ProfileNotFoundError(str(user_id))

            now = self._clock()
            status = self._cooldown.status(profile, now)
            if not status.can_change:
                logger.info(
                    "display_name_update_rejected",
                    user_id=str(user_id),
                    reason="cooldown",
                    remaining_hours=status.remaining_hours,
                )
                raise NameChangeCooldownError(status.remaining_hours, status.available_at)

            expected_version = profile.version
            self._rename(profile, name, now)
            updated = await uow.profiles.update(profile, expected_version)
            if updated is None:
                raise ProfileUpdateConflictError(str(user_id))

            await uow.commit()
            return updated

    def _ensure_valid(self, user_id: UUID, candidate: str) -> None:
        result = self._validator.validate(candidate)
        if not result.is_valid and result.error is not None:
            logger.info(
                "display_name_update_rejected",
                user_id=str(user_id),
                reason=result.error.value,
            )
            raise InvalidDisplayNameError(result.error.value)

    @staticmethod
    def _rename(profile: Profile, name: str, now: datetime) -> None:
        profile.display_name = name
        profile.last_name_change_at = now
        profile.updated_at = now
