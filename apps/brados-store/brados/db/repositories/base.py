"""
Generic repository over one document collection.

Implements the read-repair policy shared by every entity: single-item lookups
return ``None`` for both missing and malformed documents, listings silently
drop documents that fail to decode. Writes merge partial updates from the
update model's explicitly-set fields and stamp lifecycle timestamps.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from brados.db.collection import CollectionRef, DocumentSnapshot, DocumentStore, Query, collection
from brados.errors import UnsupportedOperationError
from brados.utils.clock import new_id, now_iso
from brados.utils.config import collection_name

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)
CreateT = TypeVar("CreateT", bound=BaseModel)
UpdateT = TypeVar("UpdateT", bound=BaseModel)


class ReadRepository(Generic[EntityT]):
    """Read operations for one collection."""

    collection_base: ClassVar[str]
    default_order: ClassVar[tuple] = ()

    def __init__(
        self,
        store: DocumentStore,
        *,
        clock: Callable[[], str] = now_iso,
        id_factory: Callable[[], str] = new_id,
        path: Optional[str] = None,
    ):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory
        self.collection: CollectionRef = collection(store, path or collection_name(self.collection_base))

    def sibling_collection(self, base: str) -> CollectionRef:
        """Collection ``base`` under the same prefix as this repository's collection.

        An injected ``path`` of the form ``<prefix><collection_base>`` carries
        its prefix over; any other custom path falls back to the configured
        environment prefix.
        """
        own = self.collection.path
        if own.endswith(self.collection_base):
            return collection(self.store, own[: len(own) - len(self.collection_base)] + base)
        return collection(self.store, collection_name(base))

    def decode(self, doc_id: str, data: Any) -> Optional[EntityT]:
        raise NotImplementedError

    def _from_snapshot(self, snapshot: DocumentSnapshot) -> Optional[EntityT]:
        if not snapshot.exists:
            return None
        entity = self.decode(snapshot.id, snapshot.data)
        if entity is None:
            logger.debug("Rejected malformed document %s/%s", self.collection.path, snapshot.id)
        return entity

    async def _list(self, query: Query) -> List[EntityT]:
        snapshots = await query.get()
        entities = [self._from_snapshot(snapshot) for snapshot in snapshots]
        kept = [entity for entity in entities if entity is not None]
        if len(kept) != len(snapshots):
            logger.debug(
                "Dropped %s malformed documents from %s listing",
                len(snapshots) - len(kept),
                self.collection.path,
            )
        return kept

    async def _first(self, query: Query) -> Optional[EntityT]:
        snapshots = await query.limit(1).get()
        if not snapshots:
            return None
        return self._from_snapshot(snapshots[0])

    def _ordered(self, query: Optional[Query] = None) -> Query:
        query = query if query is not None else self.collection
        for field_name, direction in self.default_order:
            query = query.order_by(field_name, direction)
        return query

    async def find_by_id(self, doc_id: str) -> Optional[EntityT]:
        return self._from_snapshot(await self.collection.document(doc_id).get())

    async def find_all(self) -> List[EntityT]:
        return await self._list(self._ordered())


class BaseRepository(ReadRepository[EntityT], Generic[EntityT, CreateT, UpdateT]):
    """Full CRUD repository.

    ``create`` returns the entity built from the encoded document without a
    re-read; ``update`` re-reads after writing so callers see stored state.
    """

    entity_model: ClassVar[Type[BaseModel]]
    update_model: ClassVar[Type[BaseModel]]
    timestamps: ClassVar[bool] = True
    created_field: ClassVar[str] = "created_at"
    updated_field: ClassVar[str] = "updated_at"

    def create_timestamps(self) -> Dict[str, str]:
        now = self.clock()
        return {self.created_field: now, self.updated_field: now}

    def encode_create(self, data: CreateT) -> Dict[str, Any]:
        return data.model_dump(by_alias=True)

    def encode_update(self, data: UpdateT) -> Dict[str, Any]:
        """Only fields the caller explicitly set, explicit ``None`` included."""
        return data.model_dump(by_alias=True, exclude_unset=True)

    def _build(self, doc_id: str, body: Mapping[str, Any]) -> EntityT:
        return self.entity_model.model_validate({**body, "id": doc_id})

    async def _persist_new(self, body: Dict[str, Any], doc_id: Optional[str] = None) -> EntityT:
        if self.timestamps:
            body.update(self.create_timestamps())
        if doc_id is None:
            ref = await self.collection.add(body)
        else:
            ref = self.collection.document(doc_id)
            await ref.set(body)
        return self._build(ref.id, body)

    async def create(self, data: CreateT) -> EntityT:
        return await self._persist_new(self.encode_create(data))

    def _coerce_update(self, data: Union[UpdateT, Mapping[str, Any]]) -> UpdateT:
        if isinstance(data, BaseModel):
            return data
        # keys present in the mapping count as provided, even when None
        return self.update_model.model_validate(dict(data))

    async def update(self, doc_id: str, data: Union[UpdateT, Mapping[str, Any]]) -> Optional[EntityT]:
        existing = await self.find_by_id(doc_id)
        if existing is None:
            return None
        payload = self.encode_update(self._coerce_update(data))
        if not payload:
            return existing
        if self.timestamps:
            payload[self.updated_field] = self.clock()
        await self.collection.document(doc_id).update(payload)
        return await self.find_by_id(doc_id)

    async def delete(self, doc_id: str) -> bool:
        existing = await self.find_by_id(doc_id)
        if existing is None:
            return False
        await self.collection.document(doc_id).delete()
        return True


class ReadOnlyRepository(ReadRepository[EntityT]):
    """Repository for collections owned by an external system of record.

    Every mutating call raises :class:`UnsupportedOperationError`.
    """

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        name = type(self).__name__
        logger.warning("Rejected %s.%s on read-only collection %s", name, operation, self.collection.path)
        return UnsupportedOperationError(name, operation)

    async def create(self, data: Any) -> EntityT:
        raise self._unsupported("create")

    async def update(self, doc_id: str, data: Any) -> Optional[EntityT]:
        raise self._unsupported("update")

    async def delete(self, doc_id: str) -> bool:
        raise self._unsupported("delete")
