"""
Post models - records stored under ``post:<id>``.

Comments and ratings are embedded in their parent post. A recipe post keeps
``recipe_data.rating`` equal to the mean of ``ratings[*].rating``.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PostPrivacy(str, Enum):
    PUBLIC = "public"
    FOLLOWERS = "followers"
    PRIVATE = "private"


RECIPE_POST_TYPE = "recipe"


class Comment(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    author_id: str
    author_name: str = ""
    content: str = ""
    created_at: str


class Rating(BaseModel):
    model_config = ConfigDict(extra="allow")

    user_id: str
    user_name: str = ""
    rating: int
    created_at: str


class RecipeData(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: Optional[Any] = None
    difficulty: Optional[Any] = None
    time: Optional[Any] = None
    servings: Optional[Any] = None
    rating: float = 0.0


class Post(BaseModel):
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    id: str
    author_id: str
    author_name: str = ""
    author_role: Optional[str] = None
    author_avatar: str = ""
    content: str = ""
    images: List[str] = Field(default_factory=list)
    video: Optional[str] = None
    background_color: Optional[str] = None
    privacy: PostPrivacy = PostPrivacy.PUBLIC
    type: Optional[str] = None
    likes: List[str] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)
    ratings: List[Rating] = Field(default_factory=list)
    recipe_data: Optional[RecipeData] = None
    created_at: str
    updated_at: Optional[str] = None

    @property
    def is_recipe(self) -> bool:
        return self.type == RECIPE_POST_TYPE

    def average_rating(self) -> float:
        if not self.ratings:
            return 0.0
        return sum(r.rating for r in self.ratings) / len(self.ratings)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
