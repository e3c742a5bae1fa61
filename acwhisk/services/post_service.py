"""
Post Service - Post lifecycle and the privacy-filtered feed.

This provides:
1. Post creation with author details denormalized from the profile
2. Author-only edits and deletes (delete also updates the author index)
3. The viewer's feed, filtered by privacy tier and sorted newest first
4. A single author's posts, filtered the same way
"""

from typing import Any, Dict, List, Optional

from acwhisk.core.exceptions import (
    AuthorizationError,
    InvalidArgumentError,
    NotFoundError,
)
from acwhisk.core.store import KeyValueStore
from acwhisk.core.utils import generate_id, is_valid_uuid, utc_now_iso
from acwhisk.models.post import RECIPE_POST_TYPE, Post, PostPrivacy, RecipeData
from acwhisk.repositories.post_repository import PostRepository
from acwhisk.repositories.user_repository import UserRepository
from acwhisk.services.base import BaseService
from acwhisk.services.visibility import filter_visible, is_visible

_PRIVACY_VALUES = {privacy.value for privacy in PostPrivacy}


def sort_newest_first(posts: List[Post]) -> List[Post]:
    return sorted(posts, key=lambda post: post.created_at or "", reverse=True)


class PostService(BaseService):
    """Post service handling all post-related business logic."""

    def __init__(self, store: KeyValueStore):
        super().__init__(store)
        self.post_repo = PostRepository(store)
        self.user_repo = UserRepository(store)

    async def create_post(
        self,
        author_id: str,
        content: str = "",
        images: Optional[List[str]] = None,
        video: Optional[str] = None,
        background_color: Optional[str] = None,
        post_type: Optional[str] = None,
        recipe_data: Optional[Dict[str, Any]] = None,
        privacy: Optional[str] = None,
        author_name: Optional[str] = None,
        author_role: Optional[str] = None,
    ) -> Post:
        """
        Create a new post and prepend it to the author's post index.

        Business rules:
        1. Privacy defaults to public and must be a known tier
        2. Only recipe posts keep recipe_data; its rating starts at 0
        3. Author name/role come from the stored profile, then token metadata

        Raises:
            InvalidArgumentError: Unknown privacy tier, or an empty post
        """
        self._log_operation("create_post", author_id=author_id, type=post_type)

        try:
            privacy = privacy or PostPrivacy.PUBLIC.value
            if privacy not in _PRIVACY_VALUES:
                raise InvalidArgumentError(
                    "Invalid privacy setting", {"allowed": sorted(_PRIVACY_VALUES)}
                )

            images = [image for image in (images or []) if isinstance(image, str)]
            if not (content or "").strip() and not images and not video:
                raise InvalidArgumentError("Post must have content, images or a video")

            profile = await self.user_repo.get_or_default(author_id)

            post = Post(
                id=generate_id(),
                author_id=author_id,
                author_name=profile.name or author_name or "",
                author_role=profile.role or author_role,
                author_avatar=profile.avatar_url,
                content=content or "",
                images=images,
                video=video or None,
                background_color=background_color,
                privacy=privacy,
                created_at=utc_now_iso(),
            )

            if post_type == RECIPE_POST_TYPE and recipe_data is not None:
                post.type = RECIPE_POST_TYPE
                fields = {k: v for k, v in recipe_data.items() if k != "rating"}
                post.recipe_data = RecipeData(**fields, rating=0.0)

            await self.post_repo.save(post)
            await self.post_repo.add_to_author_index(author_id, post.id)

            self.logger.info(f"Post created: {post.id} by {author_id}")
            return post

        except Exception as error:
            self._handle_service_error(error, "create post")

    async def update_post(self, actor_id: str, post_id: str, content: str) -> Post:
        """Edit a post's text. Author only."""
        self._log_operation("update_post", actor_id=actor_id, post_id=post_id)

        try:
            post = await self._get_owned_post(actor_id, post_id)
            post.content = content
            post.updated_at = utc_now_iso()
            await self.post_repo.save(post)
            return post

        except Exception as error:
            self._handle_service_error(error, "update post")

    async def delete_post(self, actor_id: str, post_id: str) -> None:
        """Delete a post and drop it from the author's post index. Author only."""
        self._log_operation("delete_post", actor_id=actor_id, post_id=post_id)

        try:
            post = await self._get_owned_post(actor_id, post_id)
            await self.post_repo.delete(post.id)
            await self.post_repo.remove_from_author_index(actor_id, post.id)
            self.logger.info(f"Post deleted: {post_id}")

        except Exception as error:
            self._handle_service_error(error, "delete post")

    async def get_feed(self, viewer_id: str) -> List[Post]:
        """
        Every post the viewer may see, newest first.

        Visibility is evaluated against the viewer's own stored ``following``
        list at request time, so follow changes apply on the next fetch.
        """
        self._log_operation("get_feed", viewer_id=viewer_id)

        try:
            viewer = await self.user_repo.get_or_default(viewer_id)
            posts = await self.post_repo.get_all()
            visible = filter_visible(posts, viewer_id, viewer.following)
            return sort_newest_first(visible)

        except Exception as error:
            self._handle_service_error(error, "get feed")

    async def get_user_posts(self, viewer_id: str, author_id: str) -> List[Post]:
        """An author's posts in index order, filtered for the viewer."""
        self._log_operation("get_user_posts", viewer_id=viewer_id, author_id=author_id)

        try:
            if not is_valid_uuid(author_id):
                raise InvalidArgumentError("Invalid user ID format")

            viewer = await self.user_repo.get_or_default(viewer_id)
            posts = await self.post_repo.get_author_posts(author_id)
            return filter_visible(posts, viewer_id, viewer.following)

        except Exception as error:
            self._handle_service_error(error, "get user posts")

    async def get_visible_post(self, viewer_id: str, post_id: str) -> Post:
        """
        Load a post the viewer is allowed to see.

        A post hidden by its privacy tier is reported as missing rather than
        forbidden, so its existence is not disclosed.
        """
        post = await self.post_repo.get(post_id)
        if post is None:
            raise NotFoundError("Post not found")

        viewer = await self.user_repo.get_or_default(viewer_id)
        if not is_visible(post, viewer_id, viewer.following):
            raise NotFoundError("Post not found")
        return post

    async def _get_owned_post(self, actor_id: str, post_id: str) -> Post:
        post = await self.post_repo.get(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if post.author_id != actor_id:
            raise AuthorizationError("Not your post")
        return post
