"""Ingredient repository (read-only; ingredients are managed outside this service)."""
from __future__ import annotations

from typing import Any, Optional

from brados.db.guards import failed, is_record, read_string
from brados.db.repositories.base import ReadOnlyRepository
from brados.db.schemas import Ingredient


def decode_ingredient(doc_id: str, data: Any) -> Optional[Ingredient]:
    if not is_record(data):
        return None
    name = read_string(data, "name")
    store_section = read_string(data, "store_section")
    created_at = read_string(data, "created_at")
    updated_at = read_string(data, "updated_at")
    if failed(name, store_section, created_at, updated_at):
        return None
    return Ingredient(
        id=doc_id, name=name, store_section=store_section, created_at=created_at, updated_at=updated_at
    )


class IngredientRepository(ReadOnlyRepository[Ingredient]):
    collection_base = "ingredients"
    default_order = (("name", "asc"),)

    def decode(self, doc_id: str, data: Any) -> Optional[Ingredient]:
        return decode_ingredient(doc_id, data)
