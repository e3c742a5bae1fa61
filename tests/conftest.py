"""
Shared test fixtures and configuration.
"""

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from acwhisk.core.security import security_manager
from acwhisk.core.store import InMemoryKeyValueStore, get_store
from acwhisk.main import create_app
from acwhisk.services.conversation_service import ConversationService
from acwhisk.services.interaction_service import InteractionService
from acwhisk.services.post_service import PostService
from acwhisk.services.profile_service import ProfileService
from acwhisk.services.social_graph_service import SocialGraphService

ALICE_ID = "3f1c2a7e-8b4d-4e6f-9a1b-2c3d4e5f6a01"
BOB_ID = "7a2b3c4d-5e6f-4a1b-8c2d-3e4f5a6b7c02"
CAROL_ID = "c4d5e6f7-a8b9-4c0d-9e1f-2a3b4c5d6e03"
DAVE_ID = "e1f2a3b4-c5d6-4e7f-8a9b-0c1d2e3f4a04"
MISSING_ID = "9d8c7b6a-5f4e-4d3c-ab2a-1f0e9d8c7b05"


def make_profile(user_id: str, name: str, role: Optional[str] = "student", **extra) -> Dict[str, Any]:
    """A stored profile record as the signup flow writes it."""
    record = {
        "id": user_id,
        "email": f"{name.lower()}@example.com",
        "name": name,
        "role": role,
        "status": "active",
        "created_at": "2024-01-01T00:00:00+00:00",
        "followers": [],
        "following": [],
    }
    record.update(extra)
    return record


@pytest.fixture
def store():
    """In-memory store seeded with four profiles (Dave is an instructor)."""
    return InMemoryKeyValueStore(
        {
            f"user:{ALICE_ID}": make_profile(ALICE_ID, "Alice"),
            f"user:{BOB_ID}": make_profile(BOB_ID, "Bob"),
            f"user:{CAROL_ID}": make_profile(CAROL_ID, "Carol"),
            f"user:{DAVE_ID}": make_profile(DAVE_ID, "Dave", role="instructor"),
        }
    )


@pytest.fixture
def empty_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def mock_redis():
    """Mock Redis client."""
    redis_mock = AsyncMock()
    redis_mock.ping = AsyncMock(return_value=True)
    redis_mock.get = AsyncMock(return_value=None)
    redis_mock.set = AsyncMock(return_value=True)
    redis_mock.delete = AsyncMock(return_value=1)
    redis_mock.mget = AsyncMock(return_value=[])
    return redis_mock


@pytest.fixture
def social_graph(store):
    return SocialGraphService(store)


@pytest.fixture
def post_service(store):
    return PostService(store)


@pytest.fixture
def interaction_service(store):
    return InteractionService(store)


@pytest.fixture
def conversation_service(store):
    return ConversationService(store)


@pytest.fixture
def profile_service(store):
    return ProfileService(store)


def auth_headers(user_id: str, name: Optional[str] = None, role: Optional[str] = None) -> Dict[str, str]:
    token = security_manager.create_access_token(
        user_id, email=f"{user_id[:8]}@example.com", name=name, role=role
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice_headers():
    return auth_headers(ALICE_ID, name="Alice")


@pytest.fixture
def bob_headers():
    return auth_headers(BOB_ID, name="Bob")


@pytest.fixture
def dave_headers():
    return auth_headers(DAVE_ID, name="Dave", role="instructor")


@pytest.fixture
def client(store):
    """Test client whose store dependency resolves to the in-memory store."""
    app = create_app(store=store)
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
