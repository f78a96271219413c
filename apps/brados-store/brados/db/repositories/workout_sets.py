"""
Workout set repository.

Also answers exercise history: which sets of an exercise were actually
completed, joined with the completed workout they belong to.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from brados.db.guards import (
    failed,
    is_record,
    read_enum,
    read_nullable_number,
    read_nullable_string,
    read_number,
    read_string,
)
from brados.db.repositories.base import BaseRepository
from brados.db.schemas import CompletedSetRow, WorkoutSet, WorkoutSetCreate, WorkoutSetUpdate
from brados.db.schemas.lifting import WORKOUT_SET_STATUSES, WORKOUT_STATUSES, WorkoutSetStatus

logger = logging.getLogger(__name__)


class CompletedWorkoutSummary(NamedTuple):
    scheduled_date: str
    completed_at: Optional[str]
    week_number: float
    mesocycle_id: str


def decode_workout_set(doc_id: str, data: Any) -> Optional[WorkoutSet]:
    if not is_record(data):
        return None
    workout_id = read_string(data, "workout_id")
    exercise_id = read_string(data, "exercise_id")
    set_number = read_number(data, "set_number")
    target_reps = read_number(data, "target_reps")
    target_weight = read_number(data, "target_weight")
    actual_reps = read_nullable_number(data, "actual_reps").nullable()
    actual_weight = read_nullable_number(data, "actual_weight").nullable()
    status = read_enum(data, "status", WORKOUT_SET_STATUSES)
    if failed(workout_id, exercise_id, set_number, target_reps, target_weight, actual_reps, actual_weight, status):
        return None
    return WorkoutSet(
        id=doc_id,
        workout_id=workout_id,
        exercise_id=exercise_id,
        set_number=set_number,
        target_reps=target_reps,
        target_weight=target_weight,
        actual_reps=actual_reps,
        actual_weight=actual_weight,
        status=status,
    )


def decode_completed_workout_summary(data: Any) -> Optional[CompletedWorkoutSummary]:
    """Parent workout fields needed by the history join; only completed workouts qualify."""
    if not is_record(data):
        return None
    scheduled_date = read_string(data, "scheduled_date")
    completed_at = read_nullable_string(data, "completed_at").nullable()
    week_number = read_number(data, "week_number")
    mesocycle_id = read_string(data, "mesocycle_id")
    status = read_enum(data, "status", WORKOUT_STATUSES)
    if failed(scheduled_date, completed_at, week_number, mesocycle_id, status) or status != "completed":
        return None
    return CompletedWorkoutSummary(scheduled_date, completed_at, week_number, mesocycle_id)


def _row_sort_key(row: CompletedSetRow) -> Tuple[bool, str, str, float]:
    # rows without a completion time sort after every completed one
    return (row.completed_at is None, row.completed_at or "", row.scheduled_date, row.set_number)


class WorkoutSetRepository(BaseRepository[WorkoutSet, WorkoutSetCreate, WorkoutSetUpdate]):
    collection_base = "workout_sets"
    default_order = (("workout_id", "asc"), ("exercise_id", "asc"), ("set_number", "asc"))
    entity_model = WorkoutSet
    update_model = WorkoutSetUpdate
    timestamps = False

    def decode(self, doc_id: str, data: Any) -> Optional[WorkoutSet]:
        return decode_workout_set(doc_id, data)

    def encode_create(self, data: WorkoutSetCreate) -> Dict[str, Any]:
        return {**data.model_dump(), "actual_reps": None, "actual_weight": None, "status": "pending"}

    async def find_by_workout_id(self, workout_id: str) -> List[WorkoutSet]:
        query = self.collection.where("workout_id", "==", workout_id).order_by("exercise_id").order_by("set_number")
        return await self._list(query)

    async def find_by_workout_and_exercise(self, workout_id: str, exercise_id: str) -> List[WorkoutSet]:
        query = (
            self.collection.where("workout_id", "==", workout_id)
            .where("exercise_id", "==", exercise_id)
            .order_by("set_number")
        )
        return await self._list(query)

    async def find_by_status(self, status: WorkoutSetStatus) -> List[WorkoutSet]:
        return await self._list(self.collection.where("status", "==", status))

    async def find_completed_by_exercise_id(self, exercise_id: str) -> List[CompletedSetRow]:
        """Completed sets of an exercise, joined with their completed parent workouts.

        Sets without concrete actual reps and weight are skipped, as are sets
        whose workout is missing, malformed, or not completed. Each parent is
        fetched once. Rows are ordered by workout completion time, with rows
        lacking one last, then scheduled date, then set number.
        """
        query = self.collection.where("exercise_id", "==", exercise_id).where("status", "==", "completed")
        sets = [
            workout_set
            for workout_set in await self._list(query)
            if workout_set.actual_reps is not None and workout_set.actual_weight is not None
        ]
        if not sets:
            return []

        workouts = self.sibling_collection("workouts")
        summaries: Dict[str, CompletedWorkoutSummary] = {}
        for workout_id in dict.fromkeys(workout_set.workout_id for workout_set in sets):
            snapshot = await workouts.document(workout_id).get()
            if not snapshot.exists:
                continue
            summary = decode_completed_workout_summary(snapshot.data)
            if summary is not None:
                summaries[workout_id] = summary

        rows = []
        for workout_set in sets:
            summary = summaries.get(workout_set.workout_id)
            if summary is None:
                continue
            rows.append(
                CompletedSetRow(
                    workout_id=workout_set.workout_id,
                    exercise_id=workout_set.exercise_id,
                    set_number=workout_set.set_number,
                    actual_weight=workout_set.actual_weight,
                    actual_reps=workout_set.actual_reps,
                    scheduled_date=summary.scheduled_date,
                    completed_at=summary.completed_at,
                    week_number=summary.week_number,
                    mesocycle_id=summary.mesocycle_id,
                )
            )
        logger.debug("Exercise %s history: %s sets, %s rows", exercise_id, len(sets), len(rows))
        return sorted(rows, key=_row_sort_key)
