"""
Guided meditation script repository.

Scripts embed their timed segments and interjection windows in the document.
Segment ids are assigned here on every create, and regenerated whenever an
update replaces the segment list.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from brados.db.batch import BatchWriter
from brados.db.guards import decode_each, failed, is_record, read_enum, read_number, read_string, read_string_array
from brados.db.repositories.base import BaseRepository
from brados.db.schemas import (
    GuidedMeditationCategory,
    GuidedMeditationInterjection,
    GuidedMeditationListing,
    GuidedMeditationScript,
    GuidedMeditationScriptCreate,
    GuidedMeditationScriptUpdate,
    GuidedMeditationSegment,
)
from brados.db.schemas.meditation import SEGMENT_PHASES

logger = logging.getLogger(__name__)

_LISTING_FIELDS = ("category", "title", "subtitle", "orderIndex", "durationSeconds", "created_at", "updated_at")


def decode_segment(data: Any) -> Optional[GuidedMeditationSegment]:
    if not is_record(data):
        return None
    segment_id = read_string(data, "id")
    start_seconds = read_number(data, "startSeconds")
    text = read_string(data, "text")
    phase = read_enum(data, "phase", SEGMENT_PHASES)
    if failed(segment_id, start_seconds, text, phase):
        return None
    return GuidedMeditationSegment(id=segment_id, start_seconds=start_seconds, text=text, phase=phase)


def decode_interjection(data: Any) -> Optional[GuidedMeditationInterjection]:
    if not is_record(data):
        return None
    window_start = read_number(data, "windowStartSeconds")
    window_end = read_number(data, "windowEndSeconds")
    text_options = read_string_array(data, "textOptions")
    if failed(window_start, window_end, text_options):
        return None
    return GuidedMeditationInterjection(
        window_start_seconds=window_start, window_end_seconds=window_end, text_options=text_options
    )


def _read_header(data: Any) -> Optional[Dict[str, Any]]:
    if not is_record(data):
        return None
    header = {
        "category": read_string(data, "category"),
        "title": read_string(data, "title"),
        "subtitle": read_string(data, "subtitle"),
        "order_index": read_number(data, "orderIndex"),
        "duration_seconds": read_number(data, "durationSeconds"),
        "created_at": read_string(data, "created_at"),
        "updated_at": read_string(data, "updated_at"),
    }
    if failed(*header.values()):
        return None
    return header


def decode_listing(doc_id: str, data: Any) -> Optional[GuidedMeditationListing]:
    header = _read_header(data)
    if header is None:
        return None
    return GuidedMeditationListing(id=doc_id, **header)


def decode_guided_meditation_script(doc_id: str, data: Any) -> Optional[GuidedMeditationScript]:
    header = _read_header(data)
    if header is None:
        return None
    segments = decode_each(data.get("segments"), decode_segment)
    interjections = decode_each(data.get("interjections"), decode_interjection)
    if failed(segments, interjections):
        return None
    return GuidedMeditationScript(id=doc_id, segments=segments, interjections=interjections, **header)


class GuidedMeditationRepository(
    BaseRepository[GuidedMeditationScript, GuidedMeditationScriptCreate, GuidedMeditationScriptUpdate]
):
    collection_base = "guided_meditation_scripts"
    default_order = (("orderIndex", "asc"),)
    entity_model = GuidedMeditationScript
    update_model = GuidedMeditationScriptUpdate

    def decode(self, doc_id: str, data: Any) -> Optional[GuidedMeditationScript]:
        return decode_guided_meditation_script(doc_id, data)

    def _with_segment_ids(self, segments: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [{**segment, "id": self.id_factory()} for segment in segments]

    def encode_create(self, data: GuidedMeditationScriptCreate) -> Dict[str, Any]:
        body = data.model_dump(by_alias=True)
        body["segments"] = self._with_segment_ids(body["segments"])
        return body

    def encode_update(self, data: GuidedMeditationScriptUpdate) -> Dict[str, Any]:
        payload = data.model_dump(by_alias=True, exclude_unset=True)
        if payload.get("segments") is not None:
            payload["segments"] = self._with_segment_ids(payload["segments"])
        return payload

    async def find_all_by_category(self, category: str) -> List[GuidedMeditationListing]:
        """Scripts in ``category`` without segments or interjections, for listing views."""
        query = self.collection.where("category", "==", category).order_by("orderIndex").select(*_LISTING_FIELDS)
        snapshots = await query.get()
        listings = [decode_listing(snapshot.id, snapshot.data) for snapshot in snapshots]
        return [listing for listing in listings if listing is not None]

    async def get_categories(self) -> List[GuidedMeditationCategory]:
        """Script counts per category, in order of first appearance."""
        counts: Dict[str, int] = {}
        for snapshot in await self.collection.get():
            category = read_string(snapshot.data, "category") if is_record(snapshot.data) else None
            if category is None or failed(category):
                continue
            counts[category] = counts.get(category, 0) + 1
        return [GuidedMeditationCategory(id=name, name=name, script_count=count) for name, count in counts.items()]

    async def seed(self, scripts: Sequence[GuidedMeditationScriptCreate]) -> List[GuidedMeditationScript]:
        writer = BatchWriter(self.store)
        timestamps = self.create_timestamps()
        results = []
        for script in scripts:
            body = {**self.encode_create(script), **timestamps}
            ref = self.collection.document()
            await writer.set(ref, body)
            results.append(self._build(ref.id, body))
        await writer.flush()
        logger.info("Seeded %s guided meditation scripts", len(results))
        return results
