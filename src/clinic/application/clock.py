"""Wall-clock access for use cases; handlers accept a replacement in tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def millis_code(prefix: str, now: datetime) -> str:
    """``<prefix><epoch-ms>``, used for auto-assigned product and patient codes."""
    return f"{prefix}{int(now.timestamp() * 1000)}"
