"""Chunked batch writer for seeding collections."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from brados.db.collection import DocumentRef, DocumentStore, WriteBatch
from brados.utils.config import get_settings

logger = logging.getLogger(__name__)


class BatchWriter:
    """Accumulates ``set`` writes and commits every ``max_batch`` operations.

    Call :meth:`flush` once after the last write; it commits whatever is
    pending even when the threshold was never reached.
    """

    def __init__(self, store: DocumentStore, max_batch: Optional[int] = None):
        self._store = store
        self.max_batch = max_batch or get_settings().max_batch_writes
        self._batch = WriteBatch(store)
        self.total = 0
        self.commits = 0

    @property
    def pending(self) -> int:
        return len(self._batch)

    async def set(self, ref: DocumentRef, data: Dict[str, Any]) -> None:
        self._batch.set(ref, data)
        self.total += 1
        await self.flush_if_needed()

    async def flush_if_needed(self) -> None:
        if self.pending >= self.max_batch:
            await self.flush()

    async def flush(self) -> None:
        count = self.pending
        await self._batch.commit()
        self.commits += 1
        logger.info("Batch flush committed %s writes (%s total)", count, self.total)
