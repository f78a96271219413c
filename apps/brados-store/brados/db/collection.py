"""
Collection capability consumed by repositories.

Repositories only ever talk to a :class:`DocumentStore`; they never see
sessions or connections. References and queries here are thin immutable
builders that delegate execution to the store, so any backend implementing
the store protocol (the SQL adapter, or a test double) can stand in.
"""
from __future__ import annotations

import functools
import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Literal, Optional, Protocol, Sequence, Tuple

Direction = Literal["asc", "desc"]
Operator = Literal["==", "!=", "<", "<=", ">", ">=", "in"]

OPERATORS: Tuple[str, ...] = ("==", "!=", "<", "<=", ">", ">=", "in")


@dataclass(frozen=True)
class DocumentSnapshot:
    id: str
    data: Optional[Dict[str, Any]]

    @property
    def exists(self) -> bool:
        return self.data is not None


@dataclass(frozen=True)
class ArrayUnion:
    """Update transform appending elements not already present in an array field."""

    elements: Tuple[Any, ...]


def array_union(*elements: Any) -> ArrayUnion:
    return ArrayUnion(tuple(elements))


@dataclass(frozen=True)
class FieldFilter:
    field: str
    op: str
    value: Any


@dataclass(frozen=True)
class QuerySpec:
    filters: Tuple[FieldFilter, ...] = ()
    orders: Tuple[Tuple[str, str], ...] = ()
    limit: Optional[int] = None
    projection: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class WriteOp:
    kind: Literal["set", "update", "delete"]
    path: str
    doc_id: str
    data: Optional[Dict[str, Any]] = None


class DocumentStore(Protocol):
    async def get_document(self, path: str, doc_id: str) -> DocumentSnapshot: ...

    async def set_document(self, path: str, doc_id: str, data: Dict[str, Any]) -> None: ...

    async def update_document(self, path: str, doc_id: str, data: Dict[str, Any]) -> None: ...

    async def delete_document(self, path: str, doc_id: str) -> None: ...

    async def run_query(self, path: str, spec: QuerySpec) -> List[DocumentSnapshot]: ...

    async def commit(self, ops: Sequence[WriteOp]) -> None: ...

    def new_document_id(self) -> str: ...


# ---------------------------------------------------------------------------
# Value comparison with document-store semantics
# ---------------------------------------------------------------------------

def _type_rank(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        return 1
    if isinstance(value, (int, float)):
        return 2
    if isinstance(value, str):
        return 3
    if isinstance(value, list):
        return 4
    return 5


def _values_equal(left: Any, right: Any) -> bool:
    if _type_rank(left) != _type_rank(right):
        return False
    return left == right


def _compare_values(left: Any, right: Any) -> int:
    left_rank, right_rank = _type_rank(left), _type_rank(right)
    if left_rank != right_rank:
        return -1 if left_rank < right_rank else 1
    if left_rank >= 4:
        left, right = json.dumps(left, sort_keys=True), json.dumps(right, sort_keys=True)
    if left == right:
        return 0
    return -1 if left < right else 1


def matches(data: Dict[str, Any], flt: FieldFilter) -> bool:
    """Evaluate one filter; documents lacking the field never match."""
    if flt.field not in data:
        return False
    value = data[flt.field]
    if flt.op == "==":
        return _values_equal(value, flt.value)
    if flt.op == "!=":
        return value is not None and not _values_equal(value, flt.value)
    if flt.op == "in":
        return any(_values_equal(value, candidate) for candidate in flt.value)
    # range filters only match values of the same type
    if _type_rank(value) != _type_rank(flt.value) or value is None:
        return False
    cmp = _compare_values(value, flt.value)
    return {
        "<": cmp < 0,
        "<=": cmp <= 0,
        ">": cmp > 0,
        ">=": cmp >= 0,
    }[flt.op]


def apply_query(snapshots: Sequence[DocumentSnapshot], spec: QuerySpec) -> List[DocumentSnapshot]:
    """Filter, order, limit and project documents the way the remote store would.

    Documents missing any ordered-by field are excluded. Ties are broken by
    document id so results are deterministic.
    """
    rows = [snap for snap in snapshots if snap.data is not None and all(matches(snap.data, f) for f in spec.filters)]
    rows = [snap for snap in rows if all(name in snap.data for name, _ in spec.orders)]

    def _cmp(a: DocumentSnapshot, b: DocumentSnapshot) -> int:
        for name, direction in spec.orders:
            cmp = _compare_values(a.data[name], b.data[name])
            if cmp:
                return -cmp if direction == "desc" else cmp
        return (a.id > b.id) - (a.id < b.id)

    rows.sort(key=functools.cmp_to_key(_cmp))
    if spec.limit is not None:
        rows = rows[: spec.limit]
    if spec.projection is not None:
        rows = [
            DocumentSnapshot(snap.id, {k: v for k, v in snap.data.items() if k in spec.projection})
            for snap in rows
        ]
    return rows


def apply_update(existing: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
    """Merge a partial update into an existing body, resolving transforms."""
    merged = dict(existing)
    for key, value in payload.items():
        if isinstance(value, ArrayUnion):
            current = merged.get(key)
            items = list(current) if isinstance(current, list) else []
            for element in value.elements:
                if not any(_values_equal(element, item) for item in items):
                    items.append(element)
            merged[key] = items
        else:
            merged[key] = value
    return merged


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Query:
    store: DocumentStore
    path: str
    spec: QuerySpec = field(default_factory=QuerySpec)

    def where(self, field_name: str, op: Operator, value: Any) -> "Query":
        if op not in OPERATORS:
            raise ValueError(f"Unsupported query operator: {op!r}")
        if op == "in" and not isinstance(value, (list, tuple)):
            raise ValueError("'in' filters require a list of values")
        spec = replace(self.spec, filters=self.spec.filters + (FieldFilter(field_name, op, value),))
        return replace(self, spec=spec)

    def order_by(self, field_name: str, direction: Direction = "asc") -> "Query":
        spec = replace(self.spec, orders=self.spec.orders + ((field_name, direction),))
        return replace(self, spec=spec)

    def limit(self, count: int) -> "Query":
        return replace(self, spec=replace(self.spec, limit=count))

    def select(self, *field_names: str) -> "Query":
        return replace(self, spec=replace(self.spec, projection=tuple(field_names)))

    async def get(self) -> List[DocumentSnapshot]:
        return await self.store.run_query(self.path, self.spec)


@dataclass(frozen=True)
class DocumentRef:
    store: DocumentStore
    path: str
    id: str

    def collection(self, name: str) -> "CollectionRef":
        return CollectionRef(self.store, f"{self.path}/{self.id}/{name}")

    async def get(self) -> DocumentSnapshot:
        return await self.store.get_document(self.path, self.id)

    async def set(self, data: Dict[str, Any]) -> None:
        await self.store.set_document(self.path, self.id, data)

    async def update(self, data: Dict[str, Any]) -> None:
        await self.store.update_document(self.path, self.id, data)

    async def delete(self) -> None:
        await self.store.delete_document(self.path, self.id)


@dataclass(frozen=True)
class CollectionRef(Query):
    def document(self, doc_id: Optional[str] = None) -> DocumentRef:
        return DocumentRef(self.store, self.path, doc_id or self.store.new_document_id())

    async def add(self, data: Dict[str, Any]) -> DocumentRef:
        ref = self.document()
        await ref.set(data)
        return ref


class WriteBatch:
    """Accumulates writes and commits them as one unit."""

    def __init__(self, store: DocumentStore):
        self._store = store
        self._ops: List[WriteOp] = []

    def __len__(self) -> int:
        return len(self._ops)

    def set(self, ref: DocumentRef, data: Dict[str, Any]) -> "WriteBatch":
        self._ops.append(WriteOp("set", ref.path, ref.id, data))
        return self

    def update(self, ref: DocumentRef, data: Dict[str, Any]) -> "WriteBatch":
        self._ops.append(WriteOp("update", ref.path, ref.id, data))
        return self

    def delete(self, ref: DocumentRef) -> "WriteBatch":
        self._ops.append(WriteOp("delete", ref.path, ref.id))
        return self

    async def commit(self) -> None:
        ops, self._ops = self._ops, []
        await self._store.commit(ops)


def collection(store: DocumentStore, path: str) -> CollectionRef:
    return CollectionRef(store, path)
