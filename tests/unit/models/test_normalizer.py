"""
Unit tests for read-boundary normalization.
"""

import pytest

from acwhisk.models.normalizer import (
    normalize_conversation,
    normalize_id_list,
    normalize_post,
    normalize_profile,
)

from conftest import ALICE_ID, BOB_ID, CAROL_ID


@pytest.mark.unit
class TestNormalizeProfile:
    """Profiles come back complete whatever was stored."""

    @pytest.mark.parametrize("raw", [None, "garbage", 42, [], {}])
    def test_unusable_input_yields_complete_profile(self, raw):
        profile = normalize_profile(raw, ALICE_ID)

        assert profile.id == ALICE_ID
        assert profile.name == ""
        assert profile.status == "active"
        assert profile.role is None
        assert profile.followers == []
        assert profile.following == []
        assert profile.skills == []
        assert profile.created_at
        assert profile.privacy_settings == {
            "profile_visible": True,
            "posts_visible": True,
            "photos_visible": True,
        }

    def test_invalid_id_replaced_by_fallback(self):
        profile = normalize_profile({"id": "not-a-uuid", "name": "Alice"}, ALICE_ID)
        assert profile.id == ALICE_ID
        assert profile.name == "Alice"

    def test_valid_stored_id_is_kept(self):
        profile = normalize_profile({"id": BOB_ID}, ALICE_ID)
        assert profile.id == BOB_ID

    def test_existing_created_at_is_not_restamped(self):
        profile = normalize_profile({"created_at": "2023-05-01T10:00:00+00:00"}, ALICE_ID)
        assert profile.created_at == "2023-05-01T10:00:00+00:00"

    def test_follow_lists_drop_junk_and_duplicates(self):
        profile = normalize_profile(
            {"following": [BOB_ID, None, 7, BOB_ID, CAROL_ID], "followers": "oops"},
            ALICE_ID,
        )
        assert profile.following == [BOB_ID, CAROL_ID]
        assert profile.followers == []

    def test_unknown_role_and_status_fall_back(self):
        profile = normalize_profile({"role": "wizard", "status": "sleeping"}, ALICE_ID)
        assert profile.role is None
        assert profile.status == "active"

    def test_unknown_fields_are_preserved(self):
        profile = normalize_profile({"favourite_knife": "santoku"}, ALICE_ID)
        assert profile.to_record()["favourite_knife"] == "santoku"

    def test_public_view_hides_private_fields(self):
        profile = normalize_profile({"email": "a@example.com", "name": "Alice"}, ALICE_ID)
        public = profile.public_view()

        assert "email" not in public
        assert "privacy_settings" not in public
        assert public["name"] == "Alice"
        assert public["id"] == ALICE_ID


@pytest.mark.unit
class TestNormalizePost:
    def test_missing_collections_default_empty(self):
        post = normalize_post({"id": "p1", "author_id": ALICE_ID}, "p1")

        assert post.images == []
        assert post.likes == []
        assert post.comments == []
        assert post.ratings == []
        assert post.video is None
        assert post.background_color is None
        assert post.privacy == "public"

    def test_unknown_privacy_becomes_public(self):
        post = normalize_post({"author_id": ALICE_ID, "privacy": "friends-only"}, "p1")
        assert post.privacy == "public"
        assert post.id == "p1"

    def test_malformed_ratings_are_dropped(self):
        post = normalize_post(
            {
                "author_id": ALICE_ID,
                "ratings": [
                    {"user_id": BOB_ID, "rating": 4},
                    {"user_id": CAROL_ID, "rating": "five"},
                    {"rating": 3},
                    {"user_id": CAROL_ID, "rating": True},
                    {"user_id": CAROL_ID, "rating": float("nan")},
                    {"user_id": CAROL_ID, "rating": float("inf")},
                    {"user_id": CAROL_ID, "rating": float("-inf")},
                    "junk",
                ],
            },
            "p1",
        )
        assert [(r.user_id, r.rating) for r in post.ratings] == [(BOB_ID, 4)]

    @pytest.mark.parametrize("stored", [0, 6, 99, -3, 4.9, 2.5])
    def test_out_of_range_or_fractional_ratings_are_dropped(self, stored):
        post = normalize_post(
            {
                "author_id": ALICE_ID,
                "type": "recipe",
                "ratings": [
                    {"user_id": BOB_ID, "rating": 4},
                    {"user_id": CAROL_ID, "rating": stored},
                ],
            },
            "p1",
        )
        assert [(r.user_id, r.rating) for r in post.ratings] == [(BOB_ID, 4)]
        assert post.average_rating() == 4.0

    def test_whole_float_rating_is_kept_as_int(self):
        post = normalize_post(
            {"author_id": ALICE_ID, "ratings": [{"user_id": BOB_ID, "rating": 5.0}]},
            "p1",
        )
        assert post.ratings[0].rating == 5
        assert isinstance(post.ratings[0].rating, int)

    def test_duplicate_ratings_keep_latest_per_user(self):
        post = normalize_post(
            {
                "author_id": ALICE_ID,
                "ratings": [
                    {"user_id": BOB_ID, "rating": 2},
                    {"user_id": CAROL_ID, "rating": 4},
                    {"user_id": BOB_ID, "rating": 5},
                ],
            },
            "p1",
        )
        assert sorted((r.user_id, r.rating) for r in post.ratings) == sorted(
            [(CAROL_ID, 4), (BOB_ID, 5)]
        )

    def test_recipe_data_with_bad_rating_is_reset(self):
        post = normalize_post(
            {
                "author_id": ALICE_ID,
                "type": "recipe",
                "recipe_data": {"title": "Focaccia", "time": 90, "rating": "n/a"},
            },
            "p1",
        )
        assert post.is_recipe
        assert post.recipe_data.title == "Focaccia"
        assert post.recipe_data.time == 90
        assert post.recipe_data.rating == 0.0

    @pytest.mark.parametrize("stored", [float("nan"), float("inf")])
    def test_recipe_data_with_non_finite_rating_is_reset(self, stored):
        post = normalize_post(
            {"author_id": ALICE_ID, "type": "recipe", "recipe_data": {"rating": stored}},
            "p1",
        )
        assert post.recipe_data.rating == 0.0

    def test_comments_without_author_are_dropped(self):
        post = normalize_post(
            {
                "author_id": ALICE_ID,
                "comments": [
                    {"id": "c1", "author_id": BOB_ID, "content": "Lovely crumb"},
                    {"content": "orphan"},
                ],
            },
            "p1",
        )
        assert [c.id for c in post.comments] == ["c1"]


@pytest.mark.unit
class TestNormalizeConversation:
    def test_defaults(self):
        conversation = normalize_conversation({}, "c1")

        assert conversation.id == "c1"
        assert conversation.type == "direct"
        assert conversation.participants == []
        assert conversation.messages == []
        assert conversation.request_status is None
        assert conversation.last_message is None

    def test_unknown_request_status_becomes_none(self):
        conversation = normalize_conversation(
            {"participants": [ALICE_ID, BOB_ID], "request_status": "maybe"}, "c1"
        )
        assert conversation.request_status is None
        assert conversation.participants == [ALICE_ID, BOB_ID]

    def test_group_roles_kept(self):
        conversation = normalize_conversation(
            {
                "type": "group",
                "participants": [ALICE_ID, BOB_ID],
                "participant_roles": {ALICE_ID: "owner", BOB_ID: "member", "x": 1},
            },
            "c1",
        )
        assert not conversation.is_direct
        assert conversation.participant_roles == {ALICE_ID: "owner", BOB_ID: "member"}


@pytest.mark.unit
def test_normalize_id_list():
    assert normalize_id_list(None) == []
    assert normalize_id_list({"a": 1}) == []
    assert normalize_id_list(["a", "b", "a", 3, ""]) == ["a", "b"]
