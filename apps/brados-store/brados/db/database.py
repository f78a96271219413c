"""
Database engine and session management.

Builds the SQLAlchemy engine from ``DATABASE_URL`` or the ``POSTGRES_*``
components. With nothing configured the store runs against an in-memory
SQLite database, which is also what the unit tests use.
"""
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

MEMORY_URL = "sqlite+pysqlite:///:memory:"

_POSTGRES_VARS = ("POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_DB")


def get_database_url() -> str:
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")

    values = {name: os.getenv(name) for name in _POSTGRES_VARS}
    if not any(values.values()):
        return MEMORY_URL
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    return (
        f"postgresql://{values['POSTGRES_USER']}:{values['POSTGRES_PASSWORD']}"
        f"@{values['POSTGRES_HOST']}:{values['POSTGRES_PORT']}/{values['POSTGRES_DB']}"
    )


def build_engine(url: str | None = None) -> Engine:
    url = url or get_database_url()
    if url.startswith("sqlite") and ":memory:" in url:
        # StaticPool keeps the single in-memory database alive across sessions
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


def init_schema(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def requires_serial_access(engine: Engine) -> bool:
    """True when sessions on ``engine`` must not run on several threads at once.

    SQLite connections (and the single shared connection behind ``StaticPool``)
    cannot carry overlapping transactions from different threads.
    """
    return engine.dialect.name == "sqlite" or isinstance(engine.pool, StaticPool)
