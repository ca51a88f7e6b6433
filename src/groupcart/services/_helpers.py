"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (added/fulfilled/reimbursed stamps)."""
    return datetime.now(UTC).isoformat()


def color_hex(color: str | None) -> str | None:
    """Render a stored color for display (``ff8800`` -> ``#ff8800``)."""
    if not color:
        return None
    return f"#{color}"
