"""Pydantic schemas for Profile API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.display_name import DisplayNameError


class DisplayNameCandidate(BaseModel):
    """Candidate display name.

    Not length-bounded here. Trimming and the length rules live in the
    validator, so an oversized name comes back as ``too_long``.
    """

    display_name: str


class NameChangeStatusResponse(BaseModel):
    """Schema for cooldown state."""

    can_change: bool
    remaining_hours: int = Field(..., ge=0)
    available_at: datetime | None = None


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "user_id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "player@example.com",
                "display_name": "Alice",
                "avatar_url": None,
                "last_name_change_at": "2026-10-18T09:30:00",
                "updated_at": "2026-10-18T09:30:00",
                "name_change": {
                    "can_change": False,
                    "remaining_hours": 12,
                    "available_at": "2026-10-19T09:30:00",
                },
            }
        },
    )

    user_id: UUID
    email: str
    display_name: str | None = None
    avatar_url: str | None = None
    last_name_change_at: datetime | None = None
    updated_at: datetime
    name_change: NameChangeStatusResponse | None = None


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse


class ValidationResultResponse(BaseModel):
    """Schema for a display name check."""

    is_valid: bool
    error: DisplayNameError | None = None


class NamePolicyResponse(BaseModel):
    """Schema for the naming rules a client should mirror."""

    min_length: int
    max_length: int
    allowed_punctuation: str
    cooldown_hours: int
