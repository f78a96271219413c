"""Stretch session repository: completed stretching routines, client-generated ids."""
from __future__ import annotations

from typing import Any, List, Optional

from brados.db.guards import decode_each, failed, is_record, read_enum, read_number, read_string
from brados.db.repositories.base import ReadRepository
from brados.db.schemas import CompletedStretch, StretchSession, StretchSessionCreate
from brados.db.schemas.stretching import BODY_REGIONS
from brados.utils.dates import local_date_to_utc_boundary


def decode_completed_stretch(data: Any) -> Optional[CompletedStretch]:
    if not is_record(data):
        return None
    region = read_enum(data, "region", BODY_REGIONS)
    stretch_id = read_string(data, "stretchId")
    stretch_name = read_string(data, "stretchName")
    duration_seconds = read_number(data, "durationSeconds")
    skipped_segments = read_number(data, "skippedSegments")
    if failed(region, stretch_id, stretch_name, duration_seconds, skipped_segments):
        return None
    return CompletedStretch(
        region=region,
        stretch_id=stretch_id,
        stretch_name=stretch_name,
        duration_seconds=duration_seconds,
        skipped_segments=skipped_segments,
    )


def decode_stretch_session(doc_id: str, data: Any) -> Optional[StretchSession]:
    if not is_record(data):
        return None
    completed_at = read_string(data, "completedAt")
    total_duration = read_number(data, "totalDurationSeconds")
    regions_completed = read_number(data, "regionsCompleted")
    regions_skipped = read_number(data, "regionsSkipped")
    stretches = decode_each(data.get("stretches"), decode_completed_stretch)
    if failed(completed_at, total_duration, regions_completed, regions_skipped, stretches):
        return None
    return StretchSession(
        id=doc_id,
        completed_at=completed_at,
        total_duration_seconds=total_duration,
        regions_completed=regions_completed,
        regions_skipped=regions_skipped,
        stretches=stretches,
    )


class StretchSessionRepository(ReadRepository[StretchSession]):
    collection_base = "stretch_sessions"
    default_order = (("completedAt", "desc"),)

    def decode(self, doc_id: str, data: Any) -> Optional[StretchSession]:
        return decode_stretch_session(doc_id, data)

    async def create(self, data: StretchSessionCreate) -> StretchSession:
        doc_id = self.id_factory()
        body = data.model_dump(by_alias=True)
        await self.collection.document(doc_id).set(body)
        return StretchSession.model_validate({**body, "id": doc_id})

    async def find_latest(self) -> Optional[StretchSession]:
        return await self._first(self._ordered())

    async def find_in_date_range(
        self, start_date: str, end_date: str, timezone_offset: int = 0
    ) -> List[StretchSession]:
        start = local_date_to_utc_boundary(start_date, False, timezone_offset)
        end = local_date_to_utc_boundary(end_date, True, timezone_offset)
        query = (
            self.collection.where("completedAt", ">=", start)
            .where("completedAt", "<=", end)
            .order_by("completedAt")
        )
        return await self._list(query)

    async def delete(self, doc_id: str) -> bool:
        ref = self.collection.document(doc_id)
        if not (await ref.get()).exists:
            return False
        await ref.delete()
        return True
