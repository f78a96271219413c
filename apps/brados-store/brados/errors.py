"""
Error types raised by the store and repository layers.

Decode failures are never raised; they surface as ``None`` from single-item
lookups and as dropped rows from listings. Everything here is either a store
failure or a guardrail.
"""
from __future__ import annotations


class StoreError(Exception):
    """Base class for document store failures."""


class DocumentNotFoundError(StoreError):
    """Raised when a partial update targets a document that does not exist."""

    def __init__(self, path: str, doc_id: str):
        super().__init__(f"No document to update: {path}/{doc_id}")
        self.path = path
        self.doc_id = doc_id


class BatchLimitError(StoreError):
    """Raised when a single batch commit exceeds the store's per-commit limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Batch of {size} writes exceeds the limit of {limit}")
        self.size = size
        self.limit = limit


class UnsupportedOperationError(NotImplementedError):
    """Raised by read-only repositories for every mutating operation."""

    def __init__(self, repository: str, operation: str):
        super().__init__(f"{repository}.{operation} is not implemented")
        self.repository = repository
        self.operation = operation
