from __future__ import annotations

from datetime import date, datetime, timezone


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def resolve_day(value: str | None) -> str:
    """ISO date for a form/query value; blank means today (UTC). Raises ValueError."""
    raw = (value or "").strip()
    if not raw:
        return utc_today().isoformat()
    return date.fromisoformat(raw).isoformat()
