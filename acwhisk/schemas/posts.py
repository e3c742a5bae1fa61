"""
Post schemas for request validation.

Only the envelope is validated here. Value rules (privacy tier, rating range,
non-empty comment) are enforced by the services so they hold for every
caller, not only HTTP ones.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PostCreateRequest(BaseModel):
    """Schema for post creation requests."""

    content: str = Field("", description="Post text")
    images: List[str] = Field(default_factory=list, description="Image URLs")
    video: Optional[str] = Field(None, description="Video URL")
    background_color: Optional[str] = None
    type: Optional[str] = Field(None, description='"recipe" for recipe posts')
    recipe_data: Optional[Dict[str, Any]] = Field(
        None, description="title, difficulty, time, servings"
    )
    privacy: Optional[str] = Field(None, description="public, followers or private")


class PostUpdateRequest(BaseModel):
    content: str


class CommentRequest(BaseModel):
    content: str = Field(..., description="Comment text")


class RateRequest(BaseModel):
    # Range and integer checks happen in the service
    rating: Any = Field(..., description="Integer from 1 to 5")
