from __future__ import annotations

from datetime import date, timedelta

from life_dashboards import repositories
from life_dashboards.dates import utc_today
from life_dashboards.settings import get_settings


def heatmap_window(today: date | None = None, days: int | None = None) -> tuple[date, date]:
    end = today or utc_today()
    if days is None:
        days = get_settings().heatmap_window_days
    return end - timedelta(days=days), end


def merge_counts(*sources: dict[str, int]) -> list[dict]:
    """Sum per-date counts across sources; dates come back ascending, zero counts dropped."""
    counts: dict[str, int] = {}
    for source in sources:
        for day, count in (source or {}).items():
            counts[day] = counts.get(day, 0) + int(count or 0)
    return [
        {"date": day, "count": counts[day]}
        for day in sorted(counts)
        if counts[day] > 0
    ]


async def build_heatmap(user_id: int, today: date | None = None) -> list[dict]:
    start, end = heatmap_window(today)
    journal, todos, habits = await repositories.activity_counts(user_id, start.isoformat(), end.isoformat())
    return merge_counts(journal, todos, habits)
