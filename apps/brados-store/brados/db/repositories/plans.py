"""
Plan repositories: plans, their days, and the exercises scheduled on each day.

Plan days and plan day exercises carry no lifecycle timestamps.
"""
from __future__ import annotations

from typing import Any, List, Optional

from brados.db.guards import FAIL, failed, is_record, read_number, read_string
from brados.db.repositories.base import BaseRepository
from brados.db.schemas import (
    Plan,
    PlanCreate,
    PlanDay,
    PlanDayCreate,
    PlanDayExercise,
    PlanDayExerciseCreate,
    PlanDayExerciseUpdate,
    PlanDayUpdate,
    PlanUpdate,
)

DAYS_OF_WEEK = (0, 1, 2, 3, 4, 5, 6)


def decode_plan(doc_id: str, data: Any) -> Optional[Plan]:
    if not is_record(data):
        return None
    name = read_string(data, "name")
    duration_weeks = read_number(data, "duration_weeks")
    created_at = read_string(data, "created_at")
    updated_at = read_string(data, "updated_at")
    if failed(name, duration_weeks, created_at, updated_at):
        return None
    return Plan(id=doc_id, name=name, duration_weeks=duration_weeks, created_at=created_at, updated_at=updated_at)


def _read_day_of_week(data: Any) -> Any:
    day = read_number(data, "day_of_week")
    # 3.0 is accepted as Wednesday; 3.5 is not a day
    if failed(day) or day not in DAYS_OF_WEEK:
        return FAIL
    return int(day)


def decode_plan_day(doc_id: str, data: Any) -> Optional[PlanDay]:
    if not is_record(data):
        return None
    plan_id = read_string(data, "plan_id")
    day_of_week = _read_day_of_week(data)
    name = read_string(data, "name")
    sort_order = read_number(data, "sort_order")
    if failed(plan_id, day_of_week, name, sort_order):
        return None
    return PlanDay(id=doc_id, plan_id=plan_id, day_of_week=day_of_week, name=name, sort_order=sort_order)


_PLAN_DAY_EXERCISE_NUMBERS = ("sets", "reps", "weight", "rest_seconds", "sort_order", "min_reps", "max_reps")


def decode_plan_day_exercise(doc_id: str, data: Any) -> Optional[PlanDayExercise]:
    if not is_record(data):
        return None
    plan_day_id = read_string(data, "plan_day_id")
    exercise_id = read_string(data, "exercise_id")
    numbers = {key: read_number(data, key) for key in _PLAN_DAY_EXERCISE_NUMBERS}
    if failed(plan_day_id, exercise_id, *numbers.values()):
        return None
    return PlanDayExercise(id=doc_id, plan_day_id=plan_day_id, exercise_id=exercise_id, **numbers)


class PlanRepository(BaseRepository[Plan, PlanCreate, PlanUpdate]):
    collection_base = "plans"
    default_order = (("name", "asc"),)
    entity_model = Plan
    update_model = PlanUpdate

    def decode(self, doc_id: str, data: Any) -> Optional[Plan]:
        return decode_plan(doc_id, data)

    async def is_in_use(self, plan_id: str) -> bool:
        """True when any mesocycle was started from this plan."""
        mesocycles = self.sibling_collection("mesocycles")
        snapshots = await mesocycles.where("plan_id", "==", plan_id).limit(1).get()
        return bool(snapshots)


class PlanDayRepository(BaseRepository[PlanDay, PlanDayCreate, PlanDayUpdate]):
    collection_base = "plan_days"
    default_order = (("plan_id", "asc"), ("sort_order", "asc"))
    entity_model = PlanDay
    update_model = PlanDayUpdate
    timestamps = False

    def decode(self, doc_id: str, data: Any) -> Optional[PlanDay]:
        return decode_plan_day(doc_id, data)

    async def find_by_plan_id(self, plan_id: str) -> List[PlanDay]:
        query = self.collection.where("plan_id", "==", plan_id).order_by("sort_order")
        return await self._list(query)


class PlanDayExerciseRepository(BaseRepository[PlanDayExercise, PlanDayExerciseCreate, PlanDayExerciseUpdate]):
    collection_base = "plan_day_exercises"
    default_order = (("plan_day_id", "asc"), ("sort_order", "asc"))
    entity_model = PlanDayExercise
    update_model = PlanDayExerciseUpdate
    timestamps = False

    def decode(self, doc_id: str, data: Any) -> Optional[PlanDayExercise]:
        return decode_plan_day_exercise(doc_id, data)

    async def find_by_plan_day_id(self, plan_day_id: str) -> List[PlanDayExercise]:
        query = self.collection.where("plan_day_id", "==", plan_day_id).order_by("sort_order")
        return await self._list(query)
