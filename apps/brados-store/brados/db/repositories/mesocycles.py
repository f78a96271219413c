"""Mesocycle repository."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from brados.db.guards import failed, is_record, read_enum, read_number, read_string
from brados.db.repositories.base import BaseRepository
from brados.db.schemas import Mesocycle, MesocycleCreate, MesocycleUpdate
from brados.db.schemas.lifting import MESOCYCLE_STATUSES


def decode_mesocycle(doc_id: str, data: Any) -> Optional[Mesocycle]:
    if not is_record(data):
        return None
    plan_id = read_string(data, "plan_id")
    start_date = read_string(data, "start_date")
    current_week = read_number(data, "current_week")
    status = read_enum(data, "status", MESOCYCLE_STATUSES)
    created_at = read_string(data, "created_at")
    updated_at = read_string(data, "updated_at")
    if failed(plan_id, start_date, current_week, status, created_at, updated_at):
        return None
    return Mesocycle(
        id=doc_id,
        plan_id=plan_id,
        start_date=start_date,
        current_week=current_week,
        status=status,
        created_at=created_at,
        updated_at=updated_at,
    )


class MesocycleRepository(BaseRepository[Mesocycle, MesocycleCreate, MesocycleUpdate]):
    collection_base = "mesocycles"
    default_order = (("start_date", "desc"),)
    entity_model = Mesocycle
    update_model = MesocycleUpdate

    def decode(self, doc_id: str, data: Any) -> Optional[Mesocycle]:
        return decode_mesocycle(doc_id, data)

    def encode_create(self, data: MesocycleCreate) -> Dict[str, Any]:
        # new mesocycles always start pending in week one
        return {**data.model_dump(), "current_week": 1, "status": "pending"}

    async def find_by_plan_id(self, plan_id: str) -> List[Mesocycle]:
        return await self._list(self._ordered(self.collection.where("plan_id", "==", plan_id)))

    async def find_active(self) -> List[Mesocycle]:
        return await self._list(self._ordered(self.collection.where("status", "==", "active")))
