"""
Profile API endpoints for the calling user.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from acwhisk.core.security import get_current_user
from acwhisk.dependencies import get_profile_service
from acwhisk.schemas.common import ERROR_RESPONSES
from acwhisk.schemas.users import ProfileEnsureRequest, ProfileUpdateRequest
from acwhisk.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["Profile"], responses=ERROR_RESPONSES)


@router.get("", summary="Get own profile")
async def get_profile(
    current_user: Dict[str, Any] = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> Dict[str, Any]:
    """Return the caller's profile and record the login time."""
    profile = await profile_service.get_own_profile(current_user["user_id"])
    return {"profile": profile.to_record()}


@router.put("", summary="Update own profile")
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> Dict[str, Any]:
    """
    Update the caller's profile.

    ``id``, ``followers``, ``following``, ``status`` and ``role`` are ignored.
    """
    updates = request.model_dump(exclude_unset=True)
    profile = await profile_service.update_own_profile(current_user["user_id"], updates)
    return {"profile": profile.to_record()}


@router.post("", summary="Create own profile on first sign-in")
async def ensure_profile(
    request: Optional[ProfileEnsureRequest] = Body(None),
    current_user: Dict[str, Any] = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
) -> Dict[str, Any]:
    name = (request.name if request else None) or current_user.get("name")

    profile = await profile_service.ensure_profile(
        current_user["user_id"],
        email=current_user.get("email"),
        name=name,
        role=current_user.get("role"),
    )
    return {"profile": profile.to_record()}
