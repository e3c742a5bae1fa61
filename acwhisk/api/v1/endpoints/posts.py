"""
Post API endpoints.

This provides:
1. Post creation, edits and deletion (author only)
2. The privacy-filtered feed
3. Likes, comments and recipe ratings
4. Top rated recipes
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from acwhisk.core.security import get_current_user
from acwhisk.dependencies import get_interaction_service, get_post_service
from acwhisk.schemas.common import ERROR_RESPONSES, SuccessResponse
from acwhisk.schemas.posts import (
    CommentRequest,
    PostCreateRequest,
    PostUpdateRequest,
    RateRequest,
)
from acwhisk.services.interaction_service import InteractionService
from acwhisk.services.post_service import PostService

router = APIRouter(tags=["Posts"], responses=ERROR_RESPONSES)


@router.get("/feed", summary="Get feed")
async def get_feed(
    current_user: Dict[str, Any] = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    """
    Every post the caller may see, newest first.

    **Visibility:**
    - Own posts are always shown
    - ``public`` posts are shown to everyone
    - ``followers`` posts are shown to users following the author
    - ``private`` posts are shown to their author only
    """
    posts = await post_service.get_feed(current_user["user_id"])
    return {"posts": [post.to_record() for post in posts]}


@router.post(
    "/posts",
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
)
async def create_post(
    request: PostCreateRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    post = await post_service.create_post(
        author_id=current_user["user_id"],
        content=request.content,
        images=request.images,
        video=request.video,
        background_color=request.background_color,
        post_type=request.type,
        recipe_data=request.recipe_data,
        privacy=request.privacy,
        author_name=current_user.get("name"),
        author_role=current_user.get("role"),
    )
    return {"post": post.to_record()}


@router.put("/posts/{post_id}", summary="Edit post")
async def update_post(
    post_id: str,
    request: PostUpdateRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    post = await post_service.update_post(current_user["user_id"], post_id, request.content)
    return {"post": post.to_record()}


@router.delete("/posts/{post_id}", response_model=SuccessResponse, summary="Delete post")
async def delete_post(
    post_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    await post_service.delete_post(current_user["user_id"], post_id)
    return {"success": True}


@router.post("/posts/{post_id}/like", summary="Toggle like")
async def toggle_like(
    post_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    interactions: InteractionService = Depends(get_interaction_service),
) -> Dict[str, Any]:
    post = await interactions.toggle_like(post_id, current_user["user_id"])
    return {"post": post.to_record()}


@router.post("/posts/{post_id}/comment", summary="Comment on post")
async def add_comment(
    post_id: str,
    request: CommentRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    interactions: InteractionService = Depends(get_interaction_service),
) -> Dict[str, Any]:
    post = await interactions.add_comment(
        post_id,
        current_user["user_id"],
        request.content,
        actor_name=current_user.get("name"),
    )
    return {"post": post.to_record()}


@router.post("/posts/{post_id}/rate", summary="Rate recipe")
async def rate_post(
    post_id: str,
    request: RateRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    interactions: InteractionService = Depends(get_interaction_service),
) -> Dict[str, Any]:
    """Rate a recipe post from 1 to 5; a second rating replaces the first."""
    post = await interactions.rate(
        post_id,
        current_user["user_id"],
        request.rating,
        actor_name=current_user.get("name"),
    )
    return {"post": post.to_record()}


@router.get("/recipes/top-rated", summary="Top rated recipes")
async def top_rated_recipes(
    current_user: Dict[str, Any] = Depends(get_current_user),
    interactions: InteractionService = Depends(get_interaction_service),
) -> Dict[str, Any]:
    posts = await interactions.top_rated_recipes(current_user["user_id"])
    return {"posts": [post.to_record() for post in posts]}
