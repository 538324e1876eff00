"""SQLAlchemy implementation of Profile repository."""

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile
from infrastructure.database.errors import storage_errors
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by user ID."""
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.id == id)
            .execution_options(populate_existing=True)
        )
        with storage_errors():
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        with storage_errors():
            await self._session.flush()
            await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: Profile, expected_version: int) -> Profile | None:
        """Compare-and-set write keyed on the profile version."""
        stmt = (
            update(ProfileModel)
            .where(
                ProfileModel.id == profile.id,
                ProfileModel.version == expected_version,
            )
            .values(
                display_name=profile.display_name,
                avatar_url=profile.avatar_url,
                last_name_change_at=profile.last_name_change_at,
                updated_at=profile.updated_at,
                version=expected_version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        with storage_errors():
            result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get(profile.id)

    @staticmethod
    def _to_entity(model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            email=model.email,
            display_name=model.display_name,
            avatar_url=model.avatar_url,
            last_name_change_at=model.last_name_change_at,
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_model(entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            email=entity.email,
            display_name=entity.display_name,
            avatar_url=entity.avatar_url,
            last_name_change_at=entity.last_name_change_at,
            version=entity.version,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
