"""SQLite compilation shim for the PostgreSQL JSONB document body column.

Imported for side-effects by :mod:`brados.db.models` so that
``Base.metadata.create_all()`` succeeds against the in-memory SQLite engine
used by unit tests. Bodies are stored as generic JSON text there; no JSONB
operators are used by the store.
"""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.compiler import compiles


@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(element, compiler, **kw):  # pragma: no cover - trivial
    return "JSON"
