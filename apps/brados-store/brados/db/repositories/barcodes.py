"""Barcode repository: loyalty and membership cards, ordered for display."""
from __future__ import annotations

from typing import Any, Optional

from brados.db.guards import failed, is_record, read_enum, read_number, read_string
from brados.db.repositories.base import BaseRepository
from brados.db.schemas import Barcode, BarcodeCreate, BarcodeUpdate
from brados.db.schemas.barcodes import BARCODE_TYPES


def decode_barcode(doc_id: str, data: Any) -> Optional[Barcode]:
    if not is_record(data):
        return None
    label = read_string(data, "label")
    value = read_string(data, "value")
    barcode_type = read_enum(data, "barcode_type", BARCODE_TYPES)
    color = read_string(data, "color")
    sort_order = read_number(data, "sort_order")
    created_at = read_string(data, "created_at")
    updated_at = read_string(data, "updated_at")
    if failed(label, value, barcode_type, color, sort_order, created_at, updated_at):
        return None
    return Barcode(
        id=doc_id,
        label=label,
        value=value,
        barcode_type=barcode_type,
        color=color,
        sort_order=sort_order,
        created_at=created_at,
        updated_at=updated_at,
    )


class BarcodeRepository(BaseRepository[Barcode, BarcodeCreate, BarcodeUpdate]):
    collection_base = "barcodes"
    default_order = (("sort_order", "asc"),)
    entity_model = Barcode
    update_model = BarcodeUpdate

    def decode(self, doc_id: str, data: Any) -> Optional[Barcode]:
        return decode_barcode(doc_id, data)
