"""
User profile model - the record stored under ``user:<id>``.

Design decisions:
- followers/following are ordered id lists treated as sets (no duplicates)
- role is None until onboarding assigns one
- unknown keys written by older code are kept (extra="allow")
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"


def default_privacy_settings() -> Dict[str, bool]:
    return {"profile_visible": True, "posts_visible": True, "photos_visible": True}


PUBLIC_PROFILE_FIELDS = (
    "id",
    "name",
    "role",
    "bio",
    "location",
    "skills",
    "avatar_url",
    "created_at",
    "followers",
    "following",
)


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    id: str
    email: str = ""
    name: str = ""
    role: Optional[UserRole] = None
    status: UserStatus = UserStatus.ACTIVE
    created_at: str
    last_login: Optional[str] = None
    bio: str = ""
    location: str = ""
    avatar_url: str = ""
    skills: List[str] = Field(default_factory=list)
    followers: List[str] = Field(default_factory=list)
    following: List[str] = Field(default_factory=list)
    portfolio: Dict[str, Any] = Field(default_factory=dict)
    achievements: List[Any] = Field(default_factory=list)
    privacy_settings: Dict[str, Any] = Field(default_factory=default_privacy_settings)
    has_temp_password: bool = False

    def is_following(self, user_id: str) -> bool:
        return user_id in self.following

    def public_view(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json")
        return {field: data.get(field) for field in PUBLIC_PROFILE_FIELDS}

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
