"""
Recipe repository (read-only).

Recipes are imported from an external source; this layer only reads them.
An ingredient must carry both ``quantity`` and ``unit`` keys, either of which
may be null ("to taste"). ``steps`` is either null or a list of steps.
"""
from __future__ import annotations

from typing import Any, List, Optional, Sequence

from brados.db.guards import (
    decode_each,
    failed,
    is_record,
    read_nullable_number,
    read_nullable_string,
    read_number,
    read_string,
)
from brados.db.repositories.base import ReadOnlyRepository
from brados.db.schemas import Recipe, RecipeIngredient, RecipeStep


def decode_recipe_ingredient(data: Any) -> Optional[RecipeIngredient]:
    if not is_record(data):
        return None
    ingredient_id = read_string(data, "ingredient_id")
    quantity = read_nullable_number(data, "quantity").nullable()
    unit = read_nullable_string(data, "unit").nullable()
    if failed(ingredient_id, quantity, unit):
        return None
    return RecipeIngredient(ingredient_id=ingredient_id, quantity=quantity, unit=unit)


def decode_recipe_step(data: Any) -> Optional[RecipeStep]:
    if not is_record(data):
        return None
    step_number = read_number(data, "step_number")
    instruction = read_string(data, "instruction")
    if failed(step_number, instruction):
        return None
    return RecipeStep(step_number=step_number, instruction=instruction)


def decode_recipe(doc_id: str, data: Any) -> Optional[Recipe]:
    if not is_record(data):
        return None
    meal_id = read_string(data, "meal_id")
    created_at = read_string(data, "created_at")
    updated_at = read_string(data, "updated_at")
    ingredients = decode_each(data.get("ingredients"), decode_recipe_ingredient)
    if "steps" not in data:
        return None
    steps = None if data["steps"] is None else decode_each(data["steps"], decode_recipe_step)
    if failed(meal_id, created_at, updated_at, ingredients, steps):
        return None
    return Recipe(
        id=doc_id,
        meal_id=meal_id,
        ingredients=ingredients,
        steps=steps,
        created_at=created_at,
        updated_at=updated_at,
    )


class RecipeRepository(ReadOnlyRepository[Recipe]):
    collection_base = "recipes"
    default_order = (("created_at", "asc"),)

    def decode(self, doc_id: str, data: Any) -> Optional[Recipe]:
        return decode_recipe(doc_id, data)

    async def find_by_meal_ids(self, meal_ids: Sequence[str]) -> List[Recipe]:
        if not meal_ids:
            return []
        return await self._list(self.collection.where("meal_id", "in", list(meal_ids)))
