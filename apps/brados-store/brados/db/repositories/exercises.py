"""
Exercise repository.

Exercises are either built-in defaults or user-created custom entries; an
exercise referenced by any plan day is considered in use.
"""
from __future__ import annotations

from typing import Any, List, Optional

from brados.db.guards import failed, is_record, read_boolean, read_number, read_string
from brados.db.repositories.base import BaseRepository
from brados.db.schemas import Exercise, ExerciseCreate, ExerciseUpdate


def decode_exercise(doc_id: str, data: Any) -> Optional[Exercise]:
    if not is_record(data):
        return None
    name = read_string(data, "name")
    weight_increment = read_number(data, "weight_increment")
    is_custom = read_boolean(data, "is_custom")
    created_at = read_string(data, "created_at")
    updated_at = read_string(data, "updated_at")
    if failed(name, weight_increment, is_custom, created_at, updated_at):
        return None
    return Exercise(
        id=doc_id,
        name=name,
        weight_increment=weight_increment,
        is_custom=is_custom,
        created_at=created_at,
        updated_at=updated_at,
    )


class ExerciseRepository(BaseRepository[Exercise, ExerciseCreate, ExerciseUpdate]):
    collection_base = "exercises"
    default_order = (("name", "asc"),)
    entity_model = Exercise
    update_model = ExerciseUpdate

    def decode(self, doc_id: str, data: Any) -> Optional[Exercise]:
        return decode_exercise(doc_id, data)

    async def find_by_name(self, name: str) -> Optional[Exercise]:
        return await self._first(self.collection.where("name", "==", name))

    async def find_default_exercises(self) -> List[Exercise]:
        return await self._list(self._ordered(self.collection.where("is_custom", "==", False)))

    async def find_custom_exercises(self) -> List[Exercise]:
        return await self._list(self._ordered(self.collection.where("is_custom", "==", True)))

    async def is_in_use(self, exercise_id: str) -> bool:
        plan_day_exercises = self.sibling_collection("plan_day_exercises")
        snapshots = await plan_day_exercises.where("exercise_id", "==", exercise_id).limit(1).get()
        return bool(snapshots)
