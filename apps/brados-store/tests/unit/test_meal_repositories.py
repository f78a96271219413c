from unittest.mock import patch

import pytest
import pytest_asyncio

from brados.db.repositories import (
    IngredientRepository,
    MealPlanSessionRepository,
    MealRepository,
    RecipeRepository,
)
from brados.db.schemas import (
    ConversationMessage,
    CritiqueOperation,
    MealCreate,
    MealPlanEntry,
    MealPlanSessionCreate,
)
from brados.errors import DocumentNotFoundError, UnsupportedOperationError

TIMESTAMPS = {"created_at": "2024-01-01T00:00:00.000Z", "updated_at": "2024-01-01T00:00:00.000Z"}


def _meal_create(name="Tacos", **overrides):
    fields = dict(name=name, meal_type="dinner", effort=3, has_red_meat=True, prep_ahead=False, url="https://x")
    fields.update(overrides)
    return MealCreate(**fields)


def _recipe(meal_id="m1", **overrides):
    body = {
        "meal_id": meal_id,
        "ingredients": [{"ingredient_id": "salt", "quantity": None, "unit": None}],
        "steps": [{"step_number": 1, "instruction": "Season"}],
        **TIMESTAMPS,
    }
    body.update(overrides)
    return body


class TestMeals:
    @pytest.mark.asyncio
    async def test_new_meal_was_never_planned(self, store, clock):
        repo = MealRepository(store, clock=clock)
        meal = await repo.create(_meal_create())
        assert meal.last_planned is None
        assert (await repo.collection.document(meal.id).get()).data["last_planned"] is None

    @pytest.mark.asyncio
    async def test_update_last_planned(self, store, clock):
        repo = MealRepository(store, clock=clock)
        meal = await repo.create(_meal_create())

        updated = await repo.update_last_planned(meal.id, "2024-02-01")

        assert updated.last_planned == "2024-02-01"
        assert updated.updated_at > meal.updated_at

    @pytest.mark.asyncio
    async def test_find_by_type(self, store, clock):
        repo = MealRepository(store, clock=clock)
        await repo.create(_meal_create("Pancakes", meal_type="breakfast"))
        await repo.create(_meal_create("Tacos"))
        await repo.create(_meal_create("Curry"))

        assert [m.name for m in await repo.find_by_type("dinner")] == ["Curry", "Tacos"]


class TestReadOnlyCollections:
    @pytest.mark.parametrize("repository_cls", [RecipeRepository, IngredientRepository])
    @pytest.mark.asyncio
    async def test_mutations_are_rejected(self, store, repository_cls):
        repo = repository_cls(store)
        with patch.object(store, "commit", wraps=store.commit) as spy:
            with pytest.raises(UnsupportedOperationError, match=f"{repository_cls.__name__}.create"):
                await repo.create({"name": "x"})
            with pytest.raises(UnsupportedOperationError):
                await repo.update("any", {"name": "x"})
            with pytest.raises(NotImplementedError):
                await repo.delete("any")
        spy.assert_not_called()

    @pytest.mark.asyncio
    async def test_ingredients_ordered_by_name(self, store):
        repo = IngredientRepository(store)
        await repo.collection.document("b").set({"name": "Basil", "store_section": "produce", **TIMESTAMPS})
        await repo.collection.document("a").set({"name": "Anchovy", "store_section": "canned", **TIMESTAMPS})
        await repo.collection.document("c").set({"name": "Cumin", **TIMESTAMPS})

        assert [i.name for i in await repo.find_all()] == ["Anchovy", "Basil"]


class TestRecipes:
    @pytest.mark.asyncio
    async def test_nullable_quantity_and_unit(self, store):
        repo = RecipeRepository(store)
        await repo.collection.document("r1").set(_recipe())

        recipe = await repo.find_by_id("r1")
        assert recipe.ingredients[0].quantity is None
        assert recipe.ingredients[0].unit is None
        assert recipe.steps[0].instruction == "Season"

    @pytest.mark.asyncio
    async def test_missing_unit_key_rejects_recipe(self, store):
        repo = RecipeRepository(store)
        await repo.collection.document("r1").set(
            _recipe(ingredients=[{"ingredient_id": "salt", "quantity": 1}])
        )
        assert await repo.find_by_id("r1") is None

    @pytest.mark.asyncio
    async def test_one_bad_ingredient_rejects_whole_recipe(self, store):
        repo = RecipeRepository(store)
        ingredients = [
            {"ingredient_id": "flour", "quantity": 200, "unit": "g"},
            {"ingredient_id": "eggs", "quantity": "two", "unit": None},
        ]
        await repo.collection.document("r1").set(_recipe(ingredients=ingredients))
        assert await repo.find_by_id("r1") is None

    @pytest.mark.asyncio
    async def test_null_steps_allowed_absent_steps_rejected(self, store):
        repo = RecipeRepository(store)
        await repo.collection.document("null").set(_recipe(steps=None))
        absent = _recipe()
        del absent["steps"]
        await repo.collection.document("absent").set(absent)

        assert (await repo.find_by_id("null")).steps is None
        assert await repo.find_by_id("absent") is None

    @pytest.mark.asyncio
    async def test_find_by_meal_ids(self, store):
        repo = RecipeRepository(store)
        await repo.collection.document("r1").set(_recipe("m1"))
        await repo.collection.document("r2").set(_recipe("m2"))
        await repo.collection.document("r3").set(_recipe("m3"))

        found = await repo.find_by_meal_ids(["m1", "m3"])
        assert sorted(r.meal_id for r in found) == ["m1", "m3"]

    @pytest.mark.asyncio
    async def test_find_by_no_meal_ids_does_not_query(self, store):
        repo = RecipeRepository(store)
        with patch.object(store, "run_query", wraps=store.run_query) as spy:
            assert await repo.find_by_meal_ids([]) == []
        spy.assert_not_called()


@pytest.fixture
def sessions(store, clock):
    return MealPlanSessionRepository(store, clock=clock)


@pytest_asyncio.fixture
async def session_with_meal(store, clock, sessions):
    meal = await MealRepository(store, clock=clock).create(_meal_create())
    plan = [MealPlanEntry(day_index=0, meal_type="dinner", meal_id=meal.id, meal_name=meal.name)]
    return await sessions.create(MealPlanSessionCreate(plan=plan, meals_snapshot=[meal]))


class TestMealPlanSessions:
    @pytest.mark.asyncio
    async def test_create_roundtrip(self, sessions, session_with_meal):
        found = await sessions.find_by_id(session_with_meal.id)
        assert found == session_with_meal
        assert found.history == []
        assert found.is_finalized is False
        assert found.meals_snapshot[0].name == "Tacos"

    @pytest.mark.asyncio
    async def test_append_history_adds_message(self, sessions, session_with_meal):
        message = ConversationMessage(role="user", content="Less red meat please")

        updated = await sessions.append_history(session_with_meal.id, message)

        assert updated.history == [message]
        assert updated.updated_at > session_with_meal.updated_at
        stored = (await sessions.collection.document(session_with_meal.id).get()).data
        assert "operations" not in stored["history"][0]

    @pytest.mark.asyncio
    async def test_append_history_missing_session(self, sessions):
        message = ConversationMessage(role="user", content="hi")
        assert await sessions.append_history("ghost", message) is None

    @pytest.mark.asyncio
    async def test_apply_critique_updates_writes_once(self, store, sessions, session_with_meal):
        user = ConversationMessage(role="user", content="Swap Monday")
        assistant = ConversationMessage(
            role="assistant",
            content="Removed Monday dinner",
            operations=[CritiqueOperation(day_index=0, meal_type="dinner", new_meal_id=None)],
        )
        plan = [MealPlanEntry(day_index=0, meal_type="dinner", meal_id=None, meal_name=None)]

        with patch.object(store, "commit", wraps=store.commit) as spy:
            await sessions.apply_critique_updates(session_with_meal.id, user, assistant, plan)
        assert spy.call_count == 1

        found = await sessions.find_by_id(session_with_meal.id)
        assert found.history == [user, assistant]
        assert found.history[1].operations[0].new_meal_id is None
        assert found.plan == plan

    @pytest.mark.asyncio
    async def test_apply_critique_updates_missing_session_raises(self, sessions):
        message = ConversationMessage(role="user", content="hi")
        with pytest.raises(DocumentNotFoundError):
            await sessions.apply_critique_updates("ghost", message, message, [])

    @pytest.mark.asyncio
    async def test_update_plan(self, sessions, session_with_meal):
        plan = [MealPlanEntry(day_index=1, meal_type="lunch", meal_id=None, meal_name=None)]
        updated = await sessions.update_plan(session_with_meal.id, plan)
        assert updated.plan == plan

    @pytest.mark.asyncio
    async def test_bad_nested_message_rejects_session(self, sessions, session_with_meal):
        ref = sessions.collection.document(session_with_meal.id)
        body = (await ref.get()).data
        body["history"] = [{"role": "system", "content": "hidden"}]
        await ref.set(body)

        assert await sessions.find_by_id(session_with_meal.id) is None
        assert await sessions.find_all() == []

    @pytest.mark.asyncio
    async def test_finalize(self, sessions, session_with_meal):
        updated = await sessions.update(session_with_meal.id, {"is_finalized": True})
        assert updated.is_finalized is True
