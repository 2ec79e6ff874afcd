from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HeatmapDay(BaseModel):
    date: str
    count: int


class StoredFile(BaseModel):
    id: int
    original_name: str
    mime_type: Optional[str] = None


class HealthResponse(BaseModel):
    ok: bool
