"""
Stretch region repository.

One document per body region, keyed by the region name, holding the stretch
catalogue for that region.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from brados.db.batch import BatchWriter
from brados.db.guards import (
    decode_each,
    failed,
    is_record,
    read_boolean,
    read_enum,
    read_nullable_string,
    read_string,
)
from brados.db.repositories.base import BaseRepository
from brados.db.schemas import StretchDefinition, StretchRegion, StretchRegionCreate, StretchRegionUpdate
from brados.db.schemas.stretching import BODY_REGIONS

logger = logging.getLogger(__name__)


def decode_stretch_definition(data: Any) -> Optional[StretchDefinition]:
    if not is_record(data):
        return None
    stretch_id = read_string(data, "id")
    name = read_string(data, "name")
    description = read_string(data, "description")
    bilateral = read_boolean(data, "bilateral")
    image = read_nullable_string(data, "image").optional()
    if failed(stretch_id, name, description, bilateral, image):
        return None
    return StretchDefinition(id=stretch_id, name=name, description=description, bilateral=bilateral, image=image)


def decode_stretch_region(doc_id: str, data: Any) -> Optional[StretchRegion]:
    if not is_record(data):
        return None
    region = read_enum(data, "region", BODY_REGIONS)
    display_name = read_string(data, "displayName")
    icon_name = read_string(data, "iconName")
    stretches = decode_each(data.get("stretches"), decode_stretch_definition)
    created_at = read_string(data, "created_at")
    updated_at = read_string(data, "updated_at")
    if failed(region, display_name, icon_name, stretches, created_at, updated_at):
        return None
    return StretchRegion(
        id=doc_id,
        region=region,
        display_name=display_name,
        icon_name=icon_name,
        stretches=stretches,
        created_at=created_at,
        updated_at=updated_at,
    )


class StretchRepository(BaseRepository[StretchRegion, StretchRegionCreate, StretchRegionUpdate]):
    collection_base = "stretches"
    default_order = (("region", "asc"),)
    entity_model = StretchRegion
    update_model = StretchRegionUpdate

    def decode(self, doc_id: str, data: Any) -> Optional[StretchRegion]:
        return decode_stretch_region(doc_id, data)

    async def create(self, data: StretchRegionCreate) -> StretchRegion:
        return await self._persist_new(self.encode_create(data), doc_id=data.region)

    async def find_by_region(self, region: str) -> Optional[StretchRegion]:
        return await self.find_by_id(region)

    async def seed(self, regions: Sequence[StretchRegionCreate]) -> None:
        writer = BatchWriter(self.store)
        timestamps = self.create_timestamps()
        for region in regions:
            await writer.set(self.collection.document(region.region), {**self.encode_create(region), **timestamps})
        await writer.flush()
        logger.info("Seeded %s stretch regions", len(regions))
