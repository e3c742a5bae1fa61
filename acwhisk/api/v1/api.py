"""
API v1 router - Combines all API endpoints.
"""

from fastapi import APIRouter

from acwhisk.api.v1.endpoints import conversations, posts, profile, users

api_router = APIRouter()

api_router.include_router(profile.router)
api_router.include_router(users.router)
api_router.include_router(posts.router)
api_router.include_router(conversations.router)

# API metadata for documentation
tags_metadata = [
    {
        "name": "Profile",
        "description": "The caller's own profile",
    },
    {
        "name": "Users",
        "description": "Public profiles and the follow graph",
    },
    {
        "name": "Posts",
        "description": "Posts, the privacy-filtered feed, likes, comments and ratings",
    },
    {
        "name": "Conversations",
        "description": "Direct and group conversations and message requests",
    },
]
