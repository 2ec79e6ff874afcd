from __future__ import annotations

import os

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from life_dashboards import repositories
from life_dashboards.auth import current_user_id
from life_dashboards.dates import resolve_day
from life_dashboards.render import render_dashboard
from life_dashboards.schemas import StoredFile
from life_dashboards.settings import JOURNAL_SECTIONS, get_settings

router = APIRouter()


# Include this router last: any request no other route handles renders the dashboard.
@router.api_route("/{path:path}", methods=["GET", "POST"], response_class=HTMLResponse, include_in_schema=False)
@router.get("/", response_class=HTMLResponse)
async def dashboard(d: str | None = None, error: str | None = None, user_id: int = Depends(current_user_id)):
    try:
        day = resolve_day(d)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")
    settings = get_settings()
    entries = await repositories.get_journal_sections(user_id, day)
    sections = [(title, entries.get(title, "")) for title in JOURNAL_SECTIONS]
    files = [
        StoredFile(**row)
        for row in await repositories.list_recent_files(user_id, settings.recent_files_limit)
    ]
    avatar_path = await repositories.get_avatar_path(user_id)
    avatar_url = f"/uploads/avatars/{os.path.basename(avatar_path)}" if avatar_path else ""
    return HTMLResponse(render_dashboard(day, sections, files, avatar_url, error))
