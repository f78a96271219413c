"""Wall-clock and id generation used as injectable defaults by repositories."""
from __future__ import annotations

import uuid
from datetime import datetime, UTC


def now_iso() -> str:
    """Return the current UTC instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_id() -> str:
    return str(uuid.uuid4())
