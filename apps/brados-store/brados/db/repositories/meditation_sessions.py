"""
Meditation session repository.

Sessions are immutable records with client-generated ids; they are created
and deleted but never updated.
"""
from __future__ import annotations

import math
from typing import Any, List, Optional

from brados.db.guards import failed, is_record, read_boolean, read_number, read_string
from brados.db.repositories.base import ReadRepository
from brados.db.schemas import MeditationSession, MeditationSessionCreate, MeditationStats
from brados.utils.dates import local_date_to_utc_boundary


def decode_meditation_session(doc_id: str, data: Any) -> Optional[MeditationSession]:
    if not is_record(data):
        return None
    completed_at = read_string(data, "completedAt")
    session_type = read_string(data, "sessionType")
    planned = read_number(data, "plannedDurationSeconds")
    actual = read_number(data, "actualDurationSeconds")
    completed_fully = read_boolean(data, "completedFully")
    if failed(completed_at, session_type, planned, actual, completed_fully):
        return None
    return MeditationSession(
        id=doc_id,
        completed_at=completed_at,
        session_type=session_type,
        planned_duration_seconds=planned,
        actual_duration_seconds=actual,
        completed_fully=completed_fully,
    )


class MeditationSessionRepository(ReadRepository[MeditationSession]):
    collection_base = "meditation_sessions"
    default_order = (("completedAt", "desc"),)

    def decode(self, doc_id: str, data: Any) -> Optional[MeditationSession]:
        return decode_meditation_session(doc_id, data)

    async def create(self, data: MeditationSessionCreate) -> MeditationSession:
        doc_id = self.id_factory()
        body = data.model_dump(by_alias=True)
        await self.collection.document(doc_id).set(body)
        return MeditationSession.model_validate({**body, "id": doc_id})

    async def find_latest(self) -> Optional[MeditationSession]:
        return await self._first(self._ordered())

    async def find_in_date_range(
        self, start_date: str, end_date: str, timezone_offset: int = 0
    ) -> List[MeditationSession]:
        start = local_date_to_utc_boundary(start_date, False, timezone_offset)
        end = local_date_to_utc_boundary(end_date, True, timezone_offset)
        query = (
            self.collection.where("completedAt", ">=", start)
            .where("completedAt", "<=", end)
            .order_by("completedAt")
        )
        return await self._list(query)

    async def get_stats(self) -> MeditationStats:
        """Totals over every session that decodes; malformed sessions are not counted."""
        sessions = await self._list(self.collection)
        total_seconds = sum(session.actual_duration_seconds for session in sessions)
        return MeditationStats(total_sessions=len(sessions), total_minutes=math.floor(total_seconds / 60))

    async def delete(self, doc_id: str) -> bool:
        ref = self.collection.document(doc_id)
        if not (await ref.get()).exists:
            return False
        await ref.delete()
        return True
