"""
Unit tests for likes, comments and recipe ratings.
"""

import pytest

from acwhisk.core.exceptions import InvalidArgumentError, NotFoundError

from conftest import ALICE_ID, BOB_ID, CAROL_ID, DAVE_ID


@pytest.fixture
async def recipe(post_service):
    return await post_service.create_post(
        ALICE_ID,
        content="Brown butter cookies",
        post_type="recipe",
        recipe_data={"title": "Cookies", "difficulty": "easy", "time": "30 min", "servings": 24},
    )


@pytest.fixture
async def plain_post(post_service):
    return await post_service.create_post(ALICE_ID, content="Kitchen is clean")


@pytest.mark.unit
class TestToggleLike:
    async def test_like_twice_restores_likes(self, interaction_service, plain_post):
        liked = await interaction_service.toggle_like(plain_post.id, BOB_ID)
        assert liked.likes == [BOB_ID]

        unliked = await interaction_service.toggle_like(plain_post.id, BOB_ID)
        assert unliked.likes == []

    async def test_likes_persist(self, interaction_service, plain_post, store):
        await interaction_service.toggle_like(plain_post.id, BOB_ID)
        await interaction_service.toggle_like(plain_post.id, CAROL_ID)

        stored = await store.get(f"post:{plain_post.id}")
        assert stored["likes"] == [BOB_ID, CAROL_ID]

    async def test_missing_post(self, interaction_service):
        with pytest.raises(NotFoundError):
            await interaction_service.toggle_like("missing", BOB_ID)

    async def test_invisible_post_reported_missing(self, interaction_service, post_service):
        private = await post_service.create_post(ALICE_ID, content="secret", privacy="private")

        with pytest.raises(NotFoundError):
            await interaction_service.toggle_like(private.id, BOB_ID)


@pytest.mark.unit
class TestComments:
    async def test_comment_appended(self, interaction_service, plain_post):
        await interaction_service.add_comment(plain_post.id, BOB_ID, "Nice")
        post = await interaction_service.add_comment(plain_post.id, CAROL_ID, "Agreed")

        assert [c.content for c in post.comments] == ["Nice", "Agreed"]
        assert post.comments[0].author_name == "Bob"
        assert post.comments[0].id != post.comments[1].id

    @pytest.mark.parametrize("content", ["", "   "])
    async def test_empty_comment_rejected(self, interaction_service, plain_post, content):
        with pytest.raises(InvalidArgumentError):
            await interaction_service.add_comment(plain_post.id, BOB_ID, content)


@pytest.mark.unit
class TestRatings:
    async def test_rating_replaces_previous(self, interaction_service, recipe):
        await interaction_service.rate(recipe.id, BOB_ID, 3)
        post = await interaction_service.rate(recipe.id, BOB_ID, 5)

        bob_ratings = [r for r in post.ratings if r.user_id == BOB_ID]
        assert len(bob_ratings) == 1
        assert bob_ratings[0].rating == 5
        assert post.recipe_data.rating == 5.0

    async def test_average_over_distinct_raters(self, interaction_service, recipe, store):
        await interaction_service.rate(recipe.id, BOB_ID, 3)
        await interaction_service.rate(recipe.id, CAROL_ID, 4)
        await interaction_service.rate(recipe.id, BOB_ID, 5)

        stored = await store.get(f"post:{recipe.id}")
        assert len(stored["ratings"]) == 2
        assert stored["recipe_data"]["rating"] == 4.5
        assert stored["recipe_data"]["title"] == "Cookies"

    @pytest.mark.parametrize("value", [0, 6, -1, 3.5, "4", True, None])
    async def test_invalid_rating_rejected(self, interaction_service, recipe, value):
        with pytest.raises(InvalidArgumentError):
            await interaction_service.rate(recipe.id, BOB_ID, value)

    async def test_only_recipes_can_be_rated(self, interaction_service, plain_post):
        with pytest.raises(InvalidArgumentError):
            await interaction_service.rate(plain_post.id, BOB_ID, 4)

    async def test_recipe_data_initialised_when_missing(self, interaction_service, store):
        await store.set(
            "post:legacy",
            {"id": "legacy", "author_id": ALICE_ID, "type": "recipe", "created_at": "2024-01-01"},
        )

        post = await interaction_service.rate("legacy", BOB_ID, 4)

        assert post.recipe_data is not None
        assert post.recipe_data.rating == 4.0

    async def test_rater_name_falls_back(self, interaction_service, recipe, store):
        await store.set(f"user:{CAROL_ID}", {"id": CAROL_ID})

        post = await interaction_service.rate(recipe.id, CAROL_ID, 2)
        assert post.ratings[-1].user_name == "Anonymous"

        post = await interaction_service.rate(recipe.id, CAROL_ID, 2, actor_name="Caz")
        assert post.ratings[-1].user_name == "Caz"


@pytest.mark.unit
class TestTopRated:
    async def test_sorted_by_mean_then_count(self, interaction_service, post_service):
        recipes = []
        for title in ("A", "B", "C", "D"):
            recipes.append(
                await post_service.create_post(
                    ALICE_ID, content=title, post_type="recipe", recipe_data={"title": title}
                )
            )
        a, b, c, unrated = recipes

        await interaction_service.rate(a.id, BOB_ID, 4)
        await interaction_service.rate(b.id, BOB_ID, 5)
        await interaction_service.rate(c.id, BOB_ID, 4)
        await interaction_service.rate(c.id, CAROL_ID, 4)

        top = await interaction_service.top_rated_recipes(DAVE_ID)

        assert [p.id for p in top] == [b.id, c.id, a.id]

    async def test_limit(self, interaction_service, post_service):
        for i in range(3):
            post = await post_service.create_post(
                ALICE_ID, content=str(i), post_type="recipe", recipe_data={}
            )
            await interaction_service.rate(post.id, BOB_ID, 3)

        assert len(await interaction_service.top_rated_recipes(BOB_ID, limit=2)) == 2
