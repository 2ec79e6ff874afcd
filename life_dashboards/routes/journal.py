from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, HTTPException
from fastapi.responses import RedirectResponse

from life_dashboards import repositories
from life_dashboards.auth import current_user_id
from life_dashboards.dates import resolve_day
from life_dashboards.settings import DEFAULT_JOURNAL_TITLE

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/journal/save")
async def save_journal(
    entry_date: str | None = Form(None),
    title: str | None = Form(None),
    content: str | None = Form(None),
    user_id: int = Depends(current_user_id),
):
    try:
        day = resolve_day(entry_date)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")
    clean_title = (title or "").strip() or DEFAULT_JOURNAL_TITLE
    entry = await repositories.save_journal_entry(user_id, day, clean_title, content or "")
    logger.debug("Saved journal entry %s for %s (%s)", entry.get("id"), day, clean_title)
    return RedirectResponse(url=f"/?d={quote(day)}", status_code=303)
