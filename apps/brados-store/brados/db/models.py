"""
SQLAlchemy mapping for the document table.

Every collection shares one table keyed by ``(collection, doc_id)``; the body
is the raw, schemaless document.
"""
from datetime import datetime, UTC

from sqlalchemy import Column, DateTime, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

from . import sqlite_compiler_shims  # noqa: F401


def now_utc():
    """Return an aware UTC datetime for row bookkeeping columns."""
    return datetime.now(UTC)


Base = declarative_base()


class DocumentRow(Base):
    __tablename__ = "documents"
    collection = Column(String(512), primary_key=True)
    doc_id = Column(String(255), primary_key=True)
    body = Column(JSONB, nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index("idx_documents_collection", "collection"),
    )
