"""
Cycling activity repository.

Activities live under each user: ``users/{user_id}/cyclingActivities``, with
raw sensor streams in a ``streams/data`` sub-document of the activity.
Optional power and heart-rate metrics may be absent or null in stored
documents; either way they decode to ``None``.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from brados.db.collection import CollectionRef, DocumentRef, DocumentStore, collection
from brados.db.guards import (
    failed,
    is_record,
    read_enum,
    read_nullable_number,
    read_number,
    read_number_array,
    read_string,
)
from brados.db.schemas import (
    ActivityStreams,
    ActivityStreamsInput,
    CyclingActivity,
    CyclingActivityCreate,
    CyclingActivityUpdate,
    DeleteCyclingActivityResult,
)
from brados.db.schemas.cycling import CYCLING_ACTIVITY_TYPES, LEGACY_ACTIVITY_TYPES
from brados.utils.clock import new_id, now_iso
from brados.utils.config import collection_name

logger = logging.getLogger(__name__)

_REQUIRED_NUMBERS = {
    "strava_id": "stravaId",
    "duration_minutes": "durationMinutes",
    "avg_power": "avgPower",
    "normalized_power": "normalizedPower",
    "max_power": "maxPower",
    "avg_heart_rate": "avgHeartRate",
    "max_heart_rate": "maxHeartRate",
    "tss": "tss",
    "intensity_factor": "intensityFactor",
}
_OPTIONAL_NUMBERS = {
    "ef": "ef",
    "peak5_min_power": "peak5MinPower",
    "peak20_min_power": "peak20MinPower",
    "hr_completeness": "hrCompleteness",
}
_STREAM_ARRAYS = ("watts", "heartrate", "time", "cadence")


def _read_activity_type(data: Dict[str, Any]) -> Any:
    raw = data.get("type")
    if isinstance(raw, str) and raw in LEGACY_ACTIVITY_TYPES:
        return LEGACY_ACTIVITY_TYPES[raw]
    return read_enum(data, "type", CYCLING_ACTIVITY_TYPES)


def decode_cycling_activity(doc_id: str, data: Any) -> Optional[CyclingActivity]:
    if not is_record(data):
        return None
    fields: Dict[str, Any] = {name: read_number(data, key) for name, key in _REQUIRED_NUMBERS.items()}
    fields.update({name: read_nullable_number(data, key).optional() for name, key in _OPTIONAL_NUMBERS.items()})
    fields["user_id"] = read_string(data, "userId")
    fields["date"] = read_string(data, "date")
    fields["type"] = _read_activity_type(data)
    fields["source"] = read_enum(data, "source", ("strava",))
    fields["created_at"] = read_string(data, "createdAt")
    if failed(*fields.values()):
        return None
    return CyclingActivity(id=doc_id, **fields)


def decode_activity_streams(data: Any) -> Optional[ActivityStreams]:
    if not is_record(data):
        return None
    fields: Dict[str, Any] = {
        "activity_id": read_string(data, "activityId"),
        "strava_activity_id": read_number(data, "stravaActivityId"),
        "sample_count": read_number(data, "sampleCount"),
        "created_at": read_string(data, "createdAt"),
    }
    fields.update({key: read_number_array(data, key).optional() for key in _STREAM_ARRAYS})
    if failed(*fields.values()):
        return None
    return ActivityStreams(**fields)


class CyclingActivityRepository:
    """User-scoped cycling activities and their stream data."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        clock: Callable[[], str] = now_iso,
        id_factory: Callable[[], str] = new_id,
    ):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory

    def _activities(self, user_id: str) -> CollectionRef:
        return collection(self.store, collection_name("users")).document(user_id).collection("cyclingActivities")

    def _streams(self, user_id: str, activity_id: str) -> DocumentRef:
        return self._activities(user_id).document(activity_id).collection("streams").document("data")

    async def find_all_by_user(self, user_id: str, limit: Optional[int] = None) -> List[CyclingActivity]:
        """Most recent first; malformed activities are skipped."""
        query = self._activities(user_id).order_by("date", "desc")
        if limit is not None and limit > 0:
            query = query.limit(limit)
        activities = []
        for snapshot in await query.get():
            activity = decode_cycling_activity(snapshot.id, snapshot.data)
            if activity is None:
                logger.debug("Skipping malformed cycling activity %s for user %s", snapshot.id, user_id)
                continue
            activities.append(activity)
        return activities

    async def find_by_id(self, user_id: str, activity_id: str) -> Optional[CyclingActivity]:
        snapshot = await self._activities(user_id).document(activity_id).get()
        if not snapshot.exists:
            return None
        return decode_cycling_activity(snapshot.id, snapshot.data)

    async def find_by_strava_id(self, user_id: str, strava_id: Union[int, float]) -> Optional[CyclingActivity]:
        snapshots = await self._activities(user_id).where("stravaId", "==", strava_id).limit(1).get()
        if not snapshots:
            return None
        return decode_cycling_activity(snapshots[0].id, snapshots[0].data)

    async def create(self, user_id: str, activity: CyclingActivityCreate) -> CyclingActivity:
        """Store under a new id; optional metrics left unset are omitted from the document."""
        doc_id = self.id_factory()
        body = activity.model_dump(by_alias=True)
        for key in _OPTIONAL_NUMBERS.values():
            if body.get(key) is None:
                body.pop(key, None)
        await self._activities(user_id).document(doc_id).set(body)
        return CyclingActivity.model_validate({**body, "id": doc_id})

    async def update(
        self, user_id: str, activity_id: str, updates: Union[CyclingActivityUpdate, Dict[str, Any]]
    ) -> bool:
        """Apply explicitly-set fields; returns False when the activity does not exist."""
        ref = self._activities(user_id).document(activity_id)
        if not (await ref.get()).exists:
            return False
        if not isinstance(updates, CyclingActivityUpdate):
            updates = CyclingActivityUpdate.model_validate(dict(updates))
        payload = updates.model_dump(by_alias=True, exclude_unset=True)
        if payload:
            await ref.update(payload)
        return True

    async def delete(self, user_id: str, activity_id: str) -> DeleteCyclingActivityResult:
        ref = self._activities(user_id).document(activity_id)
        if not (await ref.get()).exists:
            return DeleteCyclingActivityResult(deleted=False, had_streams=False)
        streams = self._streams(user_id, activity_id)
        had_streams = (await streams.get()).exists
        if had_streams:
            await streams.delete()
        await ref.delete()
        return DeleteCyclingActivityResult(deleted=True, had_streams=had_streams)

    async def save_streams(self, user_id: str, activity_id: str, streams: ActivityStreamsInput) -> ActivityStreams:
        body = {**streams.model_dump(by_alias=True), "createdAt": self.clock()}
        await self._streams(user_id, activity_id).set(body)
        return ActivityStreams.model_validate(body)

    async def get_streams(self, user_id: str, activity_id: str) -> Optional[ActivityStreams]:
        snapshot = await self._streams(user_id, activity_id).get()
        if not snapshot.exists:
            return None
        return decode_activity_streams(snapshot.data)
