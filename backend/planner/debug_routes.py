"""Developer helpers, only served when PLANNER_DEBUG_ENDPOINTS is enabled."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from .config import Settings, get_settings
from .models import AppBlock, LightDayTemplate
from .reflow import build_light_day_template

router = APIRouter(prefix="/api/debug", tags=["debug"])


def require_debug(settings: Settings = Depends(get_settings)) -> Settings:
    if not settings.debug_endpoints:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return settings


@router.get("/settings", status_code=status.HTTP_200_OK)
def debug_settings(settings: Settings = Depends(require_debug)) -> Dict[str, Any]:
    return settings.model_dump()


@router.post("/light-day-template", response_model=LightDayTemplate, status_code=status.HTTP_200_OK)
def debug_light_day_template(
    app_blocks: List[AppBlock],
    settings: Settings = Depends(require_debug),
) -> LightDayTemplate:
    return build_light_day_template(app_blocks)


__all__ = ["router"]
