"""Data Transfer Objects for service layer"""
from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def coerce_is_public(value: Any) -> bool:
    """Visibility flag rule: booleans pass through, "true"/"false" strings
    (any case, surrounding whitespace ignored) map to booleans, a missing
    value means public. Everything else is rejected."""
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == "true":
            return True
        if normalized == "false":
            return False
    raise ValueError(f"is_public must be a boolean or 'true'/'false', got {value!r}")


class UserPublicDTO(BaseModel):
    """Public projection of a user, safe to embed in other responses"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: Optional[str] = None
    profile_image_url: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserDTO(UserPublicDTO):
    """Full user record"""
    email: str
    bio: Optional[str] = None
    followers_count: int = 0
    following_count: int = 0
    likes_count: int = 0
    is_email_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class IdentityUpsertDTO(BaseModel):
    """Identity verified by the external provider"""
    uid: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    username: Optional[str] = None


class VideoCreateDTO(BaseModel):
    """Video registration after upload completes"""
    video_url: str = Field(..., min_length=1)
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    is_public: bool = True
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("is_public", mode="before")
    @classmethod
    def parse_is_public(cls, v):
        return coerce_is_public(v)


class VideoDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    video_url: str
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = None
    likes_count: int = 0
    comments_count: int = 0
    views_count: int = 0
    is_public: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FeedVideoDTO(VideoDTO):
    """Video with its author's public projection (null when unresolved)"""
    user: Optional[UserPublicDTO] = None


class CommentCreateDTO(BaseModel):
    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment content must not be empty")
        return v


class CommentDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    video_id: int
    user_id: str
    content: str
    likes_count: int = 0
    created_at: Optional[datetime] = None
    user: Optional[UserPublicDTO] = None


class VideoTarget(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["video"] = "video"
    video_id: int


class CommentTarget(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["comment"] = "comment"
    comment_id: int


# Exactly one target per like; "both" or "neither" cannot be expressed
LikeTarget = Annotated[Union[VideoTarget, CommentTarget], Field(discriminator="kind")]


class LikeToggleDTO(BaseModel):
    liked: bool


class FollowToggleDTO(BaseModel):
    following: bool


class HealthResponseDTO(BaseModel):
    """Service layer DTO for health check responses"""
    ok: bool = True
    timestamp: Optional[str] = None
    version: Optional[str] = None
    database: Optional[str] = None
