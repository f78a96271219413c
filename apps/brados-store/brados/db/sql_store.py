"""
SQLAlchemy-backed document store.

Implements :class:`brados.db.collection.DocumentStore` over the ``documents``
table. Session work is synchronous and is pushed to a worker thread so the
async repository surface never blocks the event loop. Filtering and ordering
are evaluated in-process with the same semantics as the hosted store.
"""
from __future__ import annotations

import copy
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

import anyio
from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from brados.db import database
from brados.db.collection import (
    CollectionRef,
    DocumentSnapshot,
    QuerySpec,
    WriteBatch,
    WriteOp,
    apply_query,
    apply_update,
)
from brados.db.models import DocumentRow
from brados.errors import BatchLimitError, DocumentNotFoundError
from brados.utils.config import STORE_BATCH_LIMIT

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlDocumentStore:
    """Document store persisting every collection in one SQL table."""

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        batch_limit: int = STORE_BATCH_LIMIT,
        serialize: bool = False,
    ):
        self._session_factory = session_factory
        self.batch_limit = batch_limit
        # one worker at a time when every session shares a single connection
        self.serialize = serialize
        self._limiter: Optional[anyio.CapacityLimiter] = None

    @classmethod
    def from_engine(cls, engine: Engine, *, create_schema: bool = True) -> "SqlDocumentStore":
        if create_schema:
            database.init_schema(engine)
        return cls(database.build_session_factory(engine), serialize=database.requires_serial_access(engine))

    @classmethod
    def from_env(cls) -> "SqlDocumentStore":
        return cls.from_engine(database.build_engine())

    # -- capability surface -------------------------------------------------

    def collection(self, path: str) -> CollectionRef:
        return CollectionRef(self, path)

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    def new_document_id(self) -> str:
        return uuid.uuid4().hex

    async def get_document(self, path: str, doc_id: str) -> DocumentSnapshot:
        return await self._run(self._get, path, doc_id)

    async def set_document(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        await self.commit([WriteOp("set", path, doc_id, data)])

    async def update_document(self, path: str, doc_id: str, data: Dict[str, Any]) -> None:
        await self.commit([WriteOp("update", path, doc_id, data)])

    async def delete_document(self, path: str, doc_id: str) -> None:
        await self.commit([WriteOp("delete", path, doc_id)])

    async def run_query(self, path: str, spec: QuerySpec) -> List[DocumentSnapshot]:
        return await self._run(self._query, path, spec)

    async def commit(self, ops: Sequence[WriteOp]) -> None:
        if len(ops) > self.batch_limit:
            raise BatchLimitError(len(ops), self.batch_limit)
        if not ops:
            return
        await self._run(self._commit, list(ops))

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        if self.serialize and self._limiter is None:
            # created lazily so it binds to the running event loop
            self._limiter = anyio.CapacityLimiter(1)
        return await anyio.to_thread.run_sync(func, *args, limiter=self._limiter)

    # -- synchronous session work ------------------------------------------

    def _get(self, path: str, doc_id: str) -> DocumentSnapshot:
        with self._session_factory() as session:
            row = session.get(DocumentRow, (path, doc_id))
            return DocumentSnapshot(doc_id, copy.deepcopy(row.body) if row is not None else None)

    def _query(self, path: str, spec: QuerySpec) -> List[DocumentSnapshot]:
        with self._session_factory() as session:
            rows = session.scalars(select(DocumentRow).where(DocumentRow.collection == path)).all()
            snapshots = [DocumentSnapshot(row.doc_id, copy.deepcopy(row.body)) for row in rows]
        return apply_query(snapshots, spec)

    def _commit(self, ops: List[WriteOp]) -> None:
        with self._session_factory() as session:
            try:
                for op in ops:
                    self._apply(session, op)
                session.commit()
            except Exception:
                session.rollback()
                raise
        if len(ops) > 1:
            logger.debug("Committed batch of %s writes", len(ops))

    @staticmethod
    def _apply(session: Session, op: WriteOp) -> None:
        row: Optional[DocumentRow] = session.get(DocumentRow, (op.path, op.doc_id))
        if op.kind == "set":
            body = copy.deepcopy(op.data)
            if row is None:
                session.add(DocumentRow(collection=op.path, doc_id=op.doc_id, body=body))
            else:
                row.body = body
            session.flush()
        elif op.kind == "update":
            if row is None:
                raise DocumentNotFoundError(op.path, op.doc_id)
            row.body = apply_update(row.body, copy.deepcopy(op.data))
            session.flush()
        elif row is not None:
            session.delete(row)
            session.flush()
