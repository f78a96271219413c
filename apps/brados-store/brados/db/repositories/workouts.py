"""
Workout repository.

Workouts are scheduled instances of a plan day within a mesocycle week. They
have no ``updated_at``; progress is tracked through ``started_at`` and
``completed_at``, both explicitly null until set.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from brados.db.guards import failed, is_record, read_enum, read_nullable_string, read_number, read_string
from brados.db.repositories.base import BaseRepository
from brados.db.schemas import Workout, WorkoutCreate, WorkoutUpdate
from brados.db.schemas.lifting import WORKOUT_STATUSES, WorkoutStatus
from brados.utils.dates import local_date_to_utc_boundary


def decode_workout(doc_id: str, data: Any) -> Optional[Workout]:
    if not is_record(data):
        return None
    mesocycle_id = read_string(data, "mesocycle_id")
    plan_day_id = read_string(data, "plan_day_id")
    week_number = read_number(data, "week_number")
    scheduled_date = read_string(data, "scheduled_date")
    status = read_enum(data, "status", WORKOUT_STATUSES)
    # null means "not yet"; a missing key is a malformed document
    started_at = read_nullable_string(data, "started_at").nullable()
    completed_at = read_nullable_string(data, "completed_at").nullable()
    if failed(mesocycle_id, plan_day_id, week_number, scheduled_date, status, started_at, completed_at):
        return None
    return Workout(
        id=doc_id,
        mesocycle_id=mesocycle_id,
        plan_day_id=plan_day_id,
        week_number=week_number,
        scheduled_date=scheduled_date,
        status=status,
        started_at=started_at,
        completed_at=completed_at,
    )


class WorkoutRepository(BaseRepository[Workout, WorkoutCreate, WorkoutUpdate]):
    collection_base = "workouts"
    default_order = (("scheduled_date", "desc"),)
    entity_model = Workout
    update_model = WorkoutUpdate
    timestamps = False

    def decode(self, doc_id: str, data: Any) -> Optional[Workout]:
        return decode_workout(doc_id, data)

    def encode_create(self, data: WorkoutCreate) -> Dict[str, Any]:
        return {**data.model_dump(), "status": "pending", "started_at": None, "completed_at": None}

    async def find_by_mesocycle_id(self, mesocycle_id: str) -> List[Workout]:
        query = self.collection.where("mesocycle_id", "==", mesocycle_id).order_by("scheduled_date")
        return await self._list(query)

    async def find_by_status(self, status: WorkoutStatus) -> List[Workout]:
        return await self._list(self.collection.where("status", "==", status).order_by("scheduled_date"))

    async def find_by_date(self, scheduled_date: str) -> List[Workout]:
        return await self._list(self.collection.where("scheduled_date", "==", scheduled_date))

    async def find_previous_week_workout(
        self, mesocycle_id: str, plan_day_id: str, week_number: int
    ) -> Optional[Workout]:
        """The same plan day one week earlier, or ``None`` in week one."""
        if week_number <= 1:
            return None
        query = (
            self.collection.where("mesocycle_id", "==", mesocycle_id)
            .where("plan_day_id", "==", plan_day_id)
            .where("week_number", "==", week_number - 1)
        )
        return await self._first(query)

    async def find_next_pending(self) -> Optional[Workout]:
        """Earliest scheduled workout that is pending or already in progress."""
        candidates = []
        for status in ("in_progress", "pending"):
            query = self.collection.where("status", "==", status).order_by("scheduled_date")
            workouts = await self._list(query)
            if workouts:
                candidates.append(workouts[0])
        if not candidates:
            return None
        # stable min: an in-progress workout wins a same-day tie
        return min(candidates, key=lambda workout: workout.scheduled_date)

    async def find_completed_in_date_range(
        self, start_date: str, end_date: str, timezone_offset: int = 0
    ) -> List[Workout]:
        start = local_date_to_utc_boundary(start_date, False, timezone_offset)
        end = local_date_to_utc_boundary(end_date, True, timezone_offset)
        query = (
            self.collection.where("status", "==", "completed")
            .where("completed_at", ">=", start)
            .where("completed_at", "<=", end)
            .order_by("completed_at")
        )
        return await self._list(query)
