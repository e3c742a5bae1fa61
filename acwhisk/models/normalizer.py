"""
Read-boundary normalization for stored records.

The key-value store performs no schema validation, so any record may have been
written by an older code path with fields missing, null, or of the wrong type.
Every function here is pure and total: whatever the input, the output is a
fully populated model, and no exception escapes.
"""

import math
from typing import Any, Dict, Iterable, List, Optional

from acwhisk.core.utils import is_valid_uuid, utc_now_iso
from acwhisk.models.conversation import (
    Conversation,
    ConversationType,
    Message,
    RequestStatus,
)
from acwhisk.models.post import Comment, Post, PostPrivacy, Rating, RecipeData
from acwhisk.models.user import (
    UserProfile,
    UserRole,
    UserStatus,
    default_privacy_settings,
)

_ROLES = {role.value for role in UserRole}
_STATUSES = {status.value for status in UserStatus}
_PRIVACY = {privacy.value for privacy in PostPrivacy}
_CONVERSATION_TYPES = {kind.value for kind in ConversationType}
_REQUEST_STATUSES = {status.value for status in RequestStatus}


def _as_dict(raw: Any) -> Dict[str, Any]:
    return raw if isinstance(raw, dict) else {}


def _text(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) and value else default


def _optional_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, list) else []


def _id_set(value: Any) -> List[str]:
    """Keep string ids in first-seen order, dropping duplicates."""
    seen = set()
    ids = []
    for item in _list(value):
        if isinstance(item, str) and item and item not in seen:
            seen.add(item)
            ids.append(item)
    return ids


def _strings(value: Any) -> List[str]:
    return [item for item in _list(value) if isinstance(item, str)]


def _choice(value: Any, allowed: Iterable[str], default: Any) -> Any:
    return value if isinstance(value, str) and value in allowed else default


def _extras(raw: Dict[str, Any], known: Iterable[str]) -> Dict[str, Any]:
    known = set(known)
    return {k: v for k, v in raw.items() if isinstance(k, str) and k not in known}


def normalize_profile(raw: Any, fallback_id: Optional[str] = None) -> UserProfile:
    """
    Produce a complete profile from a possibly partial stored record.

    ``id`` falls back to ``fallback_id`` whenever the stored value is absent
    or not a valid UUID. ``created_at`` is stamped with the current time only
    when wholly absent.
    """
    data = _as_dict(raw)

    user_id = data.get("id")
    if not is_valid_uuid(user_id):
        user_id = fallback_id or ""

    privacy_settings = data.get("privacy_settings")
    if not isinstance(privacy_settings, dict):
        privacy_settings = default_privacy_settings()

    fields = {
        "id": user_id,
        "email": _text(data.get("email")),
        "name": _text(data.get("name")),
        "role": _choice(data.get("role"), _ROLES, None),
        "status": _choice(data.get("status"), _STATUSES, UserStatus.ACTIVE.value),
        "created_at": _text(data.get("created_at")) or utc_now_iso(),
        "last_login": _optional_text(data.get("last_login")),
        "bio": _text(data.get("bio")),
        "location": _text(data.get("location")),
        "avatar_url": _text(data.get("avatar_url")),
        "skills": _strings(data.get("skills")),
        "followers": _id_set(data.get("followers")),
        "following": _id_set(data.get("following")),
        "portfolio": data.get("portfolio") if isinstance(data.get("portfolio"), dict) else {},
        "achievements": _list(data.get("achievements")),
        "privacy_settings": privacy_settings,
        "has_temp_password": data.get("has_temp_password") is True,
    }
    return UserProfile(**_extras(data, fields), **fields)


def _normalize_comment(raw: Any) -> Optional[Comment]:
    data = _as_dict(raw)
    author_id = _text(data.get("author_id"))
    if not author_id:
        return None
    fields = {
        "id": _text(data.get("id")) or author_id,
        "author_id": author_id,
        "author_name": _text(data.get("author_name")),
        "content": _text(data.get("content")),
        "created_at": _text(data.get("created_at")),
    }
    return Comment(**_extras(data, fields), **fields)


def _is_star_value(value: Any) -> bool:
    """Integral numbers from 1 to 5, as ints or whole floats."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        return False
    return 1 <= value <= 5


def _normalize_rating(raw: Any) -> Optional[Rating]:
    data = _as_dict(raw)
    user_id = _text(data.get("user_id"))
    value = data.get("rating")
    if not user_id or not _is_star_value(value):
        return None
    fields = {
        "user_id": user_id,
        "user_name": _text(data.get("user_name")),
        "rating": int(value),
        "created_at": _text(data.get("created_at")),
    }
    return Rating(**_extras(data, fields), **fields)


def _dedupe_ratings(ratings: List[Rating]) -> List[Rating]:
    """Keep the most recent rating per user (the last one written)."""
    latest: Dict[str, Rating] = {}
    for rating in ratings:
        latest.pop(rating.user_id, None)
        latest[rating.user_id] = rating
    return list(latest.values())


def _normalize_recipe_data(raw: Any) -> Optional[RecipeData]:
    if not isinstance(raw, dict):
        return None
    rating = raw.get("rating")
    if (
        isinstance(rating, bool)
        or not isinstance(rating, (int, float))
        or not math.isfinite(rating)
    ):
        rating = 0.0
    data = {k: v for k, v in raw.items() if isinstance(k, str) and k != "rating"}
    return RecipeData(**data, rating=float(rating))


def normalize_post(raw: Any, fallback_id: Optional[str] = None) -> Post:
    """Produce a complete post; missing collections become empty and privacy defaults to public."""
    data = _as_dict(raw)
    comments = [c for c in map(_normalize_comment, _list(data.get("comments"))) if c]
    ratings = [r for r in map(_normalize_rating, _list(data.get("ratings"))) if r]

    fields = {
        "id": _text(data.get("id")) or (fallback_id or ""),
        "author_id": _text(data.get("author_id")),
        "author_name": _text(data.get("author_name")),
        "author_role": _optional_text(data.get("author_role")),
        "author_avatar": _text(data.get("author_avatar")),
        "content": _text(data.get("content")),
        "images": _strings(data.get("images")),
        "video": _optional_text(data.get("video")),
        "background_color": _optional_text(data.get("background_color")),
        "privacy": _choice(data.get("privacy"), _PRIVACY, PostPrivacy.PUBLIC.value),
        "type": _optional_text(data.get("type")),
        "likes": _id_set(data.get("likes")),
        "comments": comments,
        "ratings": _dedupe_ratings(ratings),
        "recipe_data": _normalize_recipe_data(data.get("recipe_data")),
        "created_at": _text(data.get("created_at")),
        "updated_at": _optional_text(data.get("updated_at")),
    }
    return Post(**_extras(data, fields), **fields)


def _normalize_message(raw: Any) -> Optional[Message]:
    data = _as_dict(raw)
    sender_id = _text(data.get("sender_id"))
    if not sender_id:
        return None
    fields = {
        "id": _text(data.get("id")) or sender_id,
        "sender_id": sender_id,
        "sender_name": _text(data.get("sender_name")),
        "content": _text(data.get("content")),
        "created_at": _text(data.get("created_at")),
    }
    return Message(**_extras(data, fields), **fields)


def normalize_conversation(raw: Any, fallback_id: Optional[str] = None) -> Conversation:
    """Produce a complete conversation; type defaults to direct, request_status to None."""
    data = _as_dict(raw)
    messages = [m for m in map(_normalize_message, _list(data.get("messages"))) if m]
    roles = data.get("participant_roles")

    fields = {
        "id": _text(data.get("id")) or (fallback_id or ""),
        "type": _choice(data.get("type"), _CONVERSATION_TYPES, ConversationType.DIRECT.value),
        "participants": _id_set(data.get("participants")),
        "messages": messages,
        "last_message": _normalize_message(data.get("last_message")),
        "created_at": _text(data.get("created_at")),
        "created_by": _optional_text(data.get("created_by")),
        "request_status": _choice(data.get("request_status"), _REQUEST_STATUSES, None),
        "requested_by": _optional_text(data.get("requested_by")),
        "requested_at": _optional_text(data.get("requested_at")),
        "name": _optional_text(data.get("name")),
        "description": _optional_text(data.get("description")),
        "participant_roles": {
            k: v for k, v in _as_dict(roles).items() if isinstance(k, str) and isinstance(v, str)
        },
    }
    return Conversation(**_extras(data, fields), **fields)


def normalize_id_list(raw: Any) -> List[str]:
    """Index records (``user_posts:``, ``user_conversations:``) are ordered id lists."""
    return _id_set(raw)
