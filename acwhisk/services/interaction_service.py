"""
Interaction Service - Likes, comments and recipe ratings on posts.

Every operation is a read-modify-write of the single post record:
- likes toggle per user
- comments are append-only
- ratings are replaced per user, and ``recipe_data.rating`` is recomputed
  from the full ratings list after every write instead of being kept as a
  running sum that could drift
"""

from typing import List, Optional

from acwhisk.config import settings
from acwhisk.core.exceptions import InvalidArgumentError
from acwhisk.core.store import KeyValueStore
from acwhisk.core.utils import generate_id, utc_now_iso
from acwhisk.models.post import Comment, Post, Rating, RecipeData
from acwhisk.repositories.post_repository import PostRepository
from acwhisk.repositories.user_repository import UserRepository
from acwhisk.services.base import BaseService
from acwhisk.services.post_service import PostService

MIN_RATING = 1
MAX_RATING = 5


class InteractionService(BaseService):
    def __init__(self, store: KeyValueStore):
        super().__init__(store)
        self.post_repo = PostRepository(store)
        self.user_repo = UserRepository(store)
        self.post_service = PostService(store)

    async def toggle_like(self, post_id: str, actor_id: str) -> Post:
        """Add the actor's like, or remove it if already present."""
        self._log_operation("toggle_like", post_id=post_id, actor_id=actor_id)

        try:
            post = await self.post_service.get_visible_post(actor_id, post_id)

            if actor_id in post.likes:
                post.likes = [id for id in post.likes if id != actor_id]
            else:
                post.likes.append(actor_id)

            await self.post_repo.save(post)
            return post

        except Exception as error:
            self._handle_service_error(error, "like post")

    async def add_comment(
        self,
        post_id: str,
        actor_id: str,
        content: str,
        actor_name: Optional[str] = None,
    ) -> Post:
        """
        Append a comment with a fresh id and timestamp.

        Raises:
            InvalidArgumentError: Empty comment
            NotFoundError: Post missing or not visible to the actor
        """
        self._log_operation("add_comment", post_id=post_id, actor_id=actor_id)

        try:
            if not content or not content.strip():
                raise InvalidArgumentError("Comment content is required")

            post = await self.post_service.get_visible_post(actor_id, post_id)
            profile = await self.user_repo.get_or_default(actor_id)

            post.comments.append(
                Comment(
                    id=generate_id(),
                    author_id=actor_id,
                    author_name=profile.name or actor_name or "",
                    content=content,
                    created_at=utc_now_iso(),
                )
            )
            await self.post_repo.save(post)
            return post

        except Exception as error:
            self._handle_service_error(error, "comment on post")

    async def rate(
        self,
        post_id: str,
        actor_id: str,
        rating: int,
        actor_name: Optional[str] = None,
    ) -> Post:
        """
        Record the actor's 1-5 rating on a recipe post, replacing any earlier one.

        Raises:
            InvalidArgumentError: Rating outside 1..5, or the post is not a recipe
            NotFoundError: Post missing or not visible to the actor
        """
        self._log_operation("rate", post_id=post_id, actor_id=actor_id, rating=rating)

        try:
            if (
                isinstance(rating, bool)
                or not isinstance(rating, int)
                or not MIN_RATING <= rating <= MAX_RATING
            ):
                raise InvalidArgumentError("Rating must be between 1 and 5")

            post = await self.post_service.get_visible_post(actor_id, post_id)
            if not post.is_recipe:
                raise InvalidArgumentError("Can only rate recipe posts")

            profile = await self.user_repo.get_or_default(actor_id)

            post.ratings = [r for r in post.ratings if r.user_id != actor_id]
            post.ratings.append(
                Rating(
                    user_id=actor_id,
                    user_name=profile.name or actor_name or "Anonymous",
                    rating=rating,
                    created_at=utc_now_iso(),
                )
            )

            if post.recipe_data is None:
                post.recipe_data = RecipeData()
            post.recipe_data.rating = post.average_rating()

            await self.post_repo.save(post)
            return post

        except Exception as error:
            self._handle_service_error(error, "rate post")

    async def top_rated_recipes(self, viewer_id: str, limit: Optional[int] = None) -> List[Post]:
        """
        Best rated recipe posts visible to the viewer.

        Ordered by mean rating, then by number of ratings; unrated recipes
        are left out.
        """
        self._log_operation("top_rated_recipes", viewer_id=viewer_id)

        try:
            feed = await self.post_service.get_feed(viewer_id)
            rated = [post for post in feed if post.is_recipe and post.ratings]
            rated.sort(key=lambda post: (post.average_rating(), len(post.ratings)), reverse=True)
            return rated[: limit or settings.top_rated_limit]

        except Exception as error:
            self._handle_service_error(error, "get top rated recipes")
