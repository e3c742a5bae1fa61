"""
Unit tests for posts and the privacy-filtered feed.
"""

import pytest

from acwhisk.core.exceptions import AuthorizationError, InvalidArgumentError, NotFoundError

from conftest import ALICE_ID, BOB_ID, CAROL_ID


@pytest.mark.unit
class TestCreatePost:
    async def test_create_denormalizes_author_and_indexes(self, post_service, store):
        post = await post_service.create_post(ALICE_ID, content="Sourdough day")

        assert post.author_name == "Alice"
        assert post.author_role == "student"
        assert post.privacy == "public"
        assert post.likes == [] and post.comments == [] and post.ratings == []
        assert await store.get(f"post:{post.id}") is not None
        assert await store.get(f"user_posts:{ALICE_ID}") == [post.id]

    async def test_newest_post_is_first_in_index(self, post_service, store):
        first = await post_service.create_post(ALICE_ID, content="one")
        second = await post_service.create_post(ALICE_ID, content="two")

        assert await store.get(f"user_posts:{ALICE_ID}") == [second.id, first.id]

    async def test_recipe_post_rating_starts_at_zero(self, post_service):
        post = await post_service.create_post(
            ALICE_ID,
            content="Weeknight ramen",
            post_type="recipe",
            recipe_data={"title": "Ramen", "difficulty": "easy", "rating": 5},
        )

        assert post.is_recipe
        assert post.recipe_data.title == "Ramen"
        assert post.recipe_data.rating == 0.0

    async def test_invalid_privacy_rejected(self, post_service):
        with pytest.raises(InvalidArgumentError):
            await post_service.create_post(ALICE_ID, content="hi", privacy="friends")

    async def test_empty_post_rejected(self, post_service):
        with pytest.raises(InvalidArgumentError):
            await post_service.create_post(ALICE_ID, content="   ")

    async def test_image_only_post_allowed(self, post_service):
        post = await post_service.create_post(ALICE_ID, images=["https://cdn/x.jpg"])
        assert post.images == ["https://cdn/x.jpg"]

    async def test_token_name_used_when_profile_has_none(self, post_service, store):
        await store.set(f"user:{ALICE_ID}", {"id": ALICE_ID})

        post = await post_service.create_post(ALICE_ID, content="hi", author_name="Token Alice")

        assert post.author_name == "Token Alice"


@pytest.mark.unit
class TestEditAndDelete:
    async def test_author_can_edit(self, post_service):
        post = await post_service.create_post(ALICE_ID, content="draft")

        updated = await post_service.update_post(ALICE_ID, post.id, "final")

        assert updated.content == "final"
        assert updated.updated_at is not None

    async def test_other_user_cannot_edit_or_delete(self, post_service):
        post = await post_service.create_post(ALICE_ID, content="mine")

        with pytest.raises(AuthorizationError):
            await post_service.update_post(BOB_ID, post.id, "hijacked")
        with pytest.raises(AuthorizationError):
            await post_service.delete_post(BOB_ID, post.id)

    async def test_delete_removes_record_and_index_entry(self, post_service, store):
        keep = await post_service.create_post(ALICE_ID, content="keep")
        drop = await post_service.create_post(ALICE_ID, content="drop")

        await post_service.delete_post(ALICE_ID, drop.id)

        assert await store.get(f"post:{drop.id}") is None
        assert await store.get(f"user_posts:{ALICE_ID}") == [keep.id]

    async def test_missing_post(self, post_service):
        with pytest.raises(NotFoundError):
            await post_service.delete_post(ALICE_ID, "no-such-post")


@pytest.mark.unit
class TestFeed:
    @pytest.fixture
    async def posts(self, store):
        records = [
            ("p1", ALICE_ID, "public", "2024-03-01T10:00:00+00:00"),
            ("p2", ALICE_ID, "followers", "2024-03-02T10:00:00+00:00"),
            ("p3", ALICE_ID, "private", "2024-03-03T10:00:00+00:00"),
            ("p4", BOB_ID, "private", "2024-03-04T10:00:00+00:00"),
            ("p5", CAROL_ID, "public", "2024-02-01T10:00:00+00:00"),
        ]
        for post_id, author_id, privacy, created_at in records:
            await store.set(
                f"post:{post_id}",
                {
                    "id": post_id,
                    "author_id": author_id,
                    "privacy": privacy,
                    "content": post_id,
                    "created_at": created_at,
                },
            )
        await store.set(f"user_posts:{ALICE_ID}", ["p3", "p2", "p1"])

    async def test_feed_filters_and_sorts(self, post_service, posts):
        feed = await post_service.get_feed(BOB_ID)

        assert [p.id for p in feed] == ["p4", "p1", "p5"]

    async def test_following_author_reveals_followers_posts(self, post_service, social_graph, posts):
        await social_graph.follow(BOB_ID, ALICE_ID)

        feed = await post_service.get_feed(BOB_ID)

        assert [p.id for p in feed] == ["p4", "p2", "p1", "p5"]

        await social_graph.unfollow(BOB_ID, ALICE_ID)
        assert "p2" not in [p.id for p in await post_service.get_feed(BOB_ID)]

    async def test_author_sees_all_own_posts(self, post_service, posts):
        feed = await post_service.get_feed(ALICE_ID)

        assert [p.id for p in feed] == ["p3", "p2", "p1", "p5"]

    async def test_legacy_post_without_privacy_is_public(self, post_service, store):
        await store.set("post:legacy", {"id": "legacy", "author_id": CAROL_ID, "created_at": "2024-01-01"})

        feed = await post_service.get_feed(BOB_ID)

        assert [p.id for p in feed] == ["legacy"]

    async def test_user_posts_in_index_order_filtered(self, post_service, store, posts):
        await store.set(f"user_posts:{ALICE_ID}", ["p3", "gone", "p2", "p1"])

        assert [p.id for p in await post_service.get_user_posts(BOB_ID, ALICE_ID)] == ["p1"]
        assert [p.id for p in await post_service.get_user_posts(ALICE_ID, ALICE_ID)] == [
            "p3",
            "p2",
            "p1",
        ]

    async def test_user_posts_malformed_id(self, post_service):
        with pytest.raises(InvalidArgumentError):
            await post_service.get_user_posts(BOB_ID, "alice")
