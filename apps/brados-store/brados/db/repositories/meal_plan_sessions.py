"""
Meal plan session repository.

A session holds the working plan, a snapshot of the meals it was generated
from, and the critique conversation. Every nested list is decoded element by
element; one bad entry rejects the whole session.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from brados.db.collection import array_union
from brados.db.guards import (
    decode_each,
    failed,
    is_record,
    read_boolean,
    read_enum,
    read_nullable_string,
    read_number,
    read_string,
)
from brados.db.repositories.base import BaseRepository
from brados.db.repositories.meals import decode_meal
from brados.db.schemas import (
    ConversationMessage,
    CritiqueOperation,
    MealPlanEntry,
    MealPlanSession,
    MealPlanSessionCreate,
    MealPlanSessionUpdate,
)
from brados.db.schemas.meals import CONVERSATION_ROLES, MEAL_TYPES


def decode_plan_entry(data: Any) -> Optional[MealPlanEntry]:
    if not is_record(data):
        return None
    day_index = read_number(data, "day_index")
    meal_type = read_enum(data, "meal_type", MEAL_TYPES)
    meal_id = read_nullable_string(data, "meal_id").nullable()
    meal_name = read_nullable_string(data, "meal_name").nullable()
    if failed(day_index, meal_type, meal_id, meal_name):
        return None
    return MealPlanEntry(day_index=day_index, meal_type=meal_type, meal_id=meal_id, meal_name=meal_name)


def decode_critique_operation(data: Any) -> Optional[CritiqueOperation]:
    if not is_record(data):
        return None
    day_index = read_number(data, "day_index")
    meal_type = read_enum(data, "meal_type", MEAL_TYPES)
    new_meal_id = read_nullable_string(data, "new_meal_id").nullable()
    if failed(day_index, meal_type, new_meal_id):
        return None
    return CritiqueOperation(day_index=day_index, meal_type=meal_type, new_meal_id=new_meal_id)


def decode_message(data: Any) -> Optional[ConversationMessage]:
    if not is_record(data):
        return None
    role = read_enum(data, "role", CONVERSATION_ROLES)
    content = read_string(data, "content")
    raw_operations = data.get("operations")
    operations = None if raw_operations is None else decode_each(raw_operations, decode_critique_operation)
    if failed(role, content, operations):
        return None
    return ConversationMessage(role=role, content=content, operations=operations)


def _decode_snapshot_meal(data: Any):
    if not is_record(data) or not isinstance(data.get("id"), str):
        return None
    return decode_meal(data["id"], {key: value for key, value in data.items() if key != "id"})


def decode_meal_plan_session(doc_id: str, data: Any) -> Optional[MealPlanSession]:
    if not is_record(data):
        return None
    plan = decode_each(data.get("plan"), decode_plan_entry)
    meals_snapshot = decode_each(data.get("meals_snapshot"), _decode_snapshot_meal)
    history = decode_each(data.get("history"), decode_message)
    is_finalized = read_boolean(data, "is_finalized")
    created_at = read_string(data, "created_at")
    updated_at = read_string(data, "updated_at")
    if failed(plan, meals_snapshot, history, is_finalized, created_at, updated_at):
        return None
    return MealPlanSession(
        id=doc_id,
        plan=plan,
        meals_snapshot=meals_snapshot,
        history=history,
        is_finalized=is_finalized,
        created_at=created_at,
        updated_at=updated_at,
    )


def message_document(message: ConversationMessage) -> Dict[str, Any]:
    # omit "operations" rather than storing null so array unions compare equal
    body = message.model_dump()
    if body["operations"] is None:
        del body["operations"]
    return body


class MealPlanSessionRepository(BaseRepository[MealPlanSession, MealPlanSessionCreate, MealPlanSessionUpdate]):
    collection_base = "meal_plan_sessions"
    default_order = (("created_at", "desc"),)
    entity_model = MealPlanSession
    update_model = MealPlanSessionUpdate

    def decode(self, doc_id: str, data: Any) -> Optional[MealPlanSession]:
        return decode_meal_plan_session(doc_id, data)

    def encode_create(self, data: MealPlanSessionCreate) -> Dict[str, Any]:
        body = data.model_dump()
        body["history"] = [message_document(message) for message in data.history]
        return body

    def encode_update(self, data: MealPlanSessionUpdate) -> Dict[str, Any]:
        payload = data.model_dump(exclude_unset=True)
        if data.history is not None:
            payload["history"] = [message_document(message) for message in data.history]
        return payload

    async def append_history(self, session_id: str, message: ConversationMessage) -> Optional[MealPlanSession]:
        if await self.find_by_id(session_id) is None:
            return None
        await self.collection.document(session_id).update(
            {"history": array_union(message_document(message)), self.updated_field: self.clock()}
        )
        return await self.find_by_id(session_id)

    async def update_plan(self, session_id: str, entries: Sequence[MealPlanEntry]) -> Optional[MealPlanSession]:
        if await self.find_by_id(session_id) is None:
            return None
        await self.collection.document(session_id).update(
            {"plan": [entry.model_dump() for entry in entries], self.updated_field: self.clock()}
        )
        return await self.find_by_id(session_id)

    async def apply_critique_updates(
        self,
        session_id: str,
        user_message: ConversationMessage,
        assistant_message: ConversationMessage,
        plan: Sequence[MealPlanEntry],
    ) -> None:
        """Record one critique round and its resulting plan in a single write.

        Raises :class:`~brados.errors.DocumentNotFoundError` when the session
        does not exist.
        """
        await self.collection.document(session_id).update(
            {
                "history": array_union(message_document(user_message), message_document(assistant_message)),
                "plan": [entry.model_dump() for entry in plan],
                self.updated_field: self.clock(),
            }
        )
