"""Profile API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.profile import (
    DisplayNameCandidate,
    NameChangeStatusResponse,
    NamePolicyResponse,
    ProfileDetailResponse,
    ProfileResponse,
    ValidationResultResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.display_name import NameChangeStatus
from domain.entities.profile import Profile
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])


def _status_response(status: NameChangeStatus) -> NameChangeStatusResponse:
    return NameChangeStatusResponse(
        can_change=status.can_change,
        remaining_hours=status.remaining_hours,
        available_at=status.available_at,
    )


def _profile_response(profile: Profile, status: NameChangeStatus | None = None) -> ProfileDetailResponse:
    return ProfileDetailResponse(
        data=ProfileResponse(
            user_id=profile.id,
            email=profile.email,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            last_name_change_at=profile.last_name_change_at,
            updated_at=profile.updated_at,
            name_change=_status_response(status) if status else None,
        )
    )


@router.get(
    "",
    response_model=ProfileDetailResponse,
    summary="Get my profile",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the caller's profile, creating it on first access.

    Includes whether the display name can be changed right now.
    """
    profile = await service.initialize_profile(user.id, user.email, user.display_name)
    return _profile_response(profile, service.evaluate_name_change(profile))


@router.get(
    "/name-policy",
    response_model=NamePolicyResponse,
    summary="Get display name rules",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_name_policy(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> NamePolicyResponse:
    """Length limits, allowed punctuation and cooldown used by validation."""
    policy = service.get_name_policy()
    return NamePolicyResponse(
        min_length=policy.min_length,
        max_length=policy.max_length,
        allowed_punctuation=policy.allowed_punctuation,
        cooldown_hours=policy.cooldown_hours,
    )


@router.get(
    "/name-change-status",
    response_model=NameChangeStatusResponse,
    summary="Check the rename cooldown",
    responses={404: {"model": ErrorResponse, "description": "Profile not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_name_change_status(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> NameChangeStatusResponse:
    """Whether a rename is allowed now and how many hours remain otherwise."""
    status = await service.get_name_change_status(user.id)
    return _status_response(status)


@router.post(
    "/display-name/validate",
    response_model=ValidationResultResponse,
    summary="Validate a display name",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def validate_display_name(
    request: Request,
    body: DisplayNameCandidate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ValidationResultResponse:
    """Check a candidate without saving it. Invalid names still return 200."""
    result = service.validate(body.display_name)
    return ValidationResultResponse(is_valid=result.is_valid, error=result.error)


@router.patch(
    "/display-name",
    response_model=ProfileDetailResponse,
    summary="Change my display name",
    responses={
        200: {"description": "Display name updated"},
        404: {"model": ErrorResponse, "description": "Profile not found"},
        409: {"model": ErrorResponse, "description": "Cooldown active or concurrent update"},
        422: {"model": ErrorResponse, "description": "Display name breaks a naming rule"},
        503: {"model": ErrorResponse, "description": "Profile could not be saved, retry"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_display_name(
    request: Request,
    body: DisplayNameCandidate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Rename the caller, starting a new cooldown window on success."""
    profile = await service.update_display_name(user.id, body.display_name)
    return _profile_response(profile, service.evaluate_name_change(profile))
