"""
User schemas for profile and follow requests.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FollowRequest(BaseModel):
    """Schema for follow and unfollow requests."""

    target_user_id: str = Field(..., description="User to follow or unfollow")


class FollowStatusResponse(BaseModel):
    current_user_follows_target: bool
    target_follows_current_user: bool
    mutual_follow: bool


class FollowingResponse(BaseModel):
    following: List[Dict[str, Any]]


class ProfileUpdateRequest(BaseModel):
    """
    Editable profile fields.

    Unknown keys are passed through to the stored record; identity and graph
    fields are dropped by the service whatever the request contains.
    """

    model_config = ConfigDict(extra="allow")

    name: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = None
    location: Optional[str] = None
    avatar_url: Optional[str] = None
    skills: Optional[List[str]] = None
    portfolio: Optional[Dict[str, Any]] = None
    privacy_settings: Optional[Dict[str, Any]] = None


class ProfileEnsureRequest(BaseModel):
    """Optional display name; the role always comes from the token."""

    name: Optional[str] = Field(None, max_length=255)
