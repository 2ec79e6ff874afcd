from __future__ import annotations

from life_dashboards.settings import get_settings


async def current_user_id() -> int:
    # Single-user install: every request acts as the configured owner.
    return get_settings().default_user_id
