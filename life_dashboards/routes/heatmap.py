from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from life_dashboards.auth import current_user_id
from life_dashboards.heatmap import build_heatmap
from life_dashboards.schemas import HeatmapDay

router = APIRouter()


@router.get("/api/heatmap", response_model=List[HeatmapDay])
async def heatmap(user_id: int = Depends(current_user_id)):
    return await build_heatmap(user_id)
