from __future__ import annotations

import logging
import os

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from life_dashboards import repositories
from life_dashboards.auth import current_user_id
from life_dashboards.settings import get_settings
from life_dashboards.storage import UploadError, store_upload

logger = logging.getLogger(__name__)

router = APIRouter()


def _parse_file_id(value: str | None) -> int:
    try:
        return int(str(value or "").strip())
    except ValueError:
        return 0


@router.post("/files/upload")
async def upload_file(
    file: UploadFile | None = File(None),
    user_id: int = Depends(current_user_id),
):
    settings = get_settings()
    try:
        stored = await run_in_threadpool(
            store_upload,
            file.file if file is not None else None,
            file.filename if file is not None else None,
            settings.files_dir,
        )
    except UploadError as exc:
        logger.warning("File upload rejected: %s", exc.message)
        return RedirectResponse(url=f"/?error={exc.code}", status_code=303)
    await repositories.create_file_record(
        user_id,
        stored.original_name,
        stored.stored_name,
        stored.mime_type,
        stored.size_bytes,
        stored.stored_path,
    )
    return RedirectResponse(url="/", status_code=303)


@router.get("/files/view")
async def view_file(id: str | None = None, user_id: int = Depends(current_user_id)):
    record = await repositories.get_file(user_id, _parse_file_id(id))
    if not record or not os.path.isfile(record["stored_path"]):
        return PlainTextResponse("Not found", status_code=404)
    return FileResponse(
        record["stored_path"],
        media_type=record.get("mime_type") or "application/octet-stream",
        filename=os.path.basename(record["original_name"]),
        content_disposition_type="inline",
    )
