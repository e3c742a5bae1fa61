"""
User API endpoints.

This provides:
1. Follow / unfollow
2. Follow lists and follow status
3. Public profiles and the user directory
4. A user's visible posts
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from acwhisk.core.security import get_current_user
from acwhisk.dependencies import (
    get_post_service,
    get_profile_service,
    get_social_graph_service,
)
from acwhisk.schemas.common import ERROR_RESPONSES, SuccessResponse
from acwhisk.schemas.users import (
    FollowingResponse,
    FollowRequest,
    FollowStatusResponse,
)
from acwhisk.services.post_service import PostService
from acwhisk.services.profile_service import ProfileService
from acwhisk.services.social_graph_service import SocialGraphService

router = APIRouter(tags=["Users"], responses=ERROR_RESPONSES)


@router.post(
    "/users/follow",
    response_model=SuccessResponse,
    summary="Follow a user",
)
async def follow_user(
    request: FollowRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    social_graph: SocialGraphService = Depends(get_social_graph_service),
) -> Dict[str, Any]:
    """
    Follow another user.

    Following someone you already follow succeeds without changes.
    """
    await social_graph.follow(current_user["user_id"], request.target_user_id)
    return {"success": True}


@router.post(
    "/users/unfollow",
    response_model=SuccessResponse,
    summary="Unfollow a user",
)
async def unfollow_user(
    request: FollowRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    social_graph: SocialGraphService = Depends(get_social_graph_service),
) -> Dict[str, Any]:
    await social_graph.unfollow(current_user["user_id"], request.target_user_id)
    return {"success": True}


@router.get("/users/all", summary="List users")
async def list_users(
    current_user: Dict[str, Any] = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> Dict[str, Any]:
    users = await profile_service.list_users(current_user["user_id"])
    return {"users": users}


@router.get(
    "/users/{user_id}/following",
    response_model=FollowingResponse,
    summary="Who a user follows",
)
async def get_following(
    user_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    social_graph: SocialGraphService = Depends(get_social_graph_service),
) -> Dict[str, Any]:
    following = await social_graph.get_following(user_id)
    return {"following": following}


@router.get("/users/{user_id}/posts", summary="A user's visible posts")
async def get_user_posts(
    user_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    posts = await post_service.get_user_posts(current_user["user_id"], user_id)
    return {"posts": [post.to_record() for post in posts]}


@router.get("/users/{user_id}", summary="Public profile")
async def get_user_profile(
    user_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> Dict[str, Any]:
    profile = await profile_service.get_public_profile(user_id)
    return {"profile": profile}


@router.get(
    "/follows/check/{target_id}",
    response_model=FollowStatusResponse,
    summary="Follow relationship with another user",
)
async def check_follow_status(
    target_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    social_graph: SocialGraphService = Depends(get_social_graph_service),
) -> Dict[str, Any]:
    return await social_graph.follow_status(current_user["user_id"], target_id)
