"""Meal repository."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from brados.db.guards import failed, is_record, read_boolean, read_enum, read_nullable_string, read_number, read_string
from brados.db.repositories.base import BaseRepository
from brados.db.schemas import Meal, MealCreate, MealUpdate
from brados.db.schemas.meals import MEAL_TYPES, MealType


def decode_meal(doc_id: str, data: Any) -> Optional[Meal]:
    if not is_record(data):
        return None
    name = read_string(data, "name")
    meal_type = read_enum(data, "meal_type", MEAL_TYPES)
    effort = read_number(data, "effort")
    has_red_meat = read_boolean(data, "has_red_meat")
    prep_ahead = read_boolean(data, "prep_ahead")
    url = read_string(data, "url")
    last_planned = read_nullable_string(data, "last_planned").nullable()
    created_at = read_string(data, "created_at")
    updated_at = read_string(data, "updated_at")
    if failed(name, meal_type, effort, has_red_meat, prep_ahead, url, last_planned, created_at, updated_at):
        return None
    return Meal(
        id=doc_id,
        name=name,
        meal_type=meal_type,
        effort=effort,
        has_red_meat=has_red_meat,
        prep_ahead=prep_ahead,
        url=url,
        last_planned=last_planned,
        created_at=created_at,
        updated_at=updated_at,
    )


class MealRepository(BaseRepository[Meal, MealCreate, MealUpdate]):
    collection_base = "meals"
    default_order = (("name", "asc"),)
    entity_model = Meal
    update_model = MealUpdate

    def decode(self, doc_id: str, data: Any) -> Optional[Meal]:
        return decode_meal(doc_id, data)

    def encode_create(self, data: MealCreate) -> Dict[str, Any]:
        return {**data.model_dump(), "last_planned": None}

    async def find_by_type(self, meal_type: MealType) -> List[Meal]:
        return await self._list(self.collection.where("meal_type", "==", meal_type).order_by("name"))

    async def update_last_planned(self, meal_id: str, last_planned: str) -> Optional[Meal]:
        return await self.update(meal_id, MealUpdate(last_planned=last_planned))
