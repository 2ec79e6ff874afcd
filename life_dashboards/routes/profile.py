from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from life_dashboards import repositories
from life_dashboards.auth import current_user_id
from life_dashboards.settings import get_settings
from life_dashboards.storage import UploadError, replace_avatar

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/profile/avatar")
async def upload_avatar(
    avatar: UploadFile | None = File(None),
    user_id: int = Depends(current_user_id),
):
    settings = get_settings()
    previous_path = await repositories.get_avatar_path(user_id)
    try:
        avatar_path = await run_in_threadpool(
            replace_avatar,
            avatar.file if avatar is not None else None,
            avatar.filename if avatar is not None else None,
            settings.avatars_dir,
            user_id,
            previous_path,
        )
    except UploadError as exc:
        logger.warning("Avatar upload rejected: %s", exc.message)
        if exc.code == "store_failed":
            # Stale avatar files may already be gone; do not point at a missing file.
            await repositories.set_avatar_path(user_id, None)
        return RedirectResponse(url=f"/?error={exc.code}", status_code=303)
    await repositories.set_avatar_path(user_id, avatar_path)
    return RedirectResponse(url="/", status_code=303)
