"""Dependency injection factories for API v1."""

from datetime import timedelta
from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.display_name_validator import DisplayNameValidator
from domain.services.name_change_cooldown import NameChangeCooldown
from domain.services.profile_service import ProfileService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_display_name_validator() -> DisplayNameValidator:
    """Validator configured with the banned word override, if any."""
    return DisplayNameValidator(banned_words=settings.banned_display_name_words_list or None)


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance.

    Cached so every request shares one per-user lock registry.
    """
    return ProfileService(
        get_uow_factory(),
        validator=get_display_name_validator(),
        cooldown=NameChangeCooldown(cooldown=timedelta(hours=settings.name_change_cooldown_hours)),
        save_timeout=settings.profile_save_timeout_seconds,
    )
