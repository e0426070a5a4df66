"""Mastery ladder and workbook pace endpoints."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from .ladder_progress import apply_session, ensure_progress
from .ladders import LADDER_CATALOG, get_ladder
from .models import (
    LadderCardDefinition,
    LadderProgress,
    LadderSessionInput,
    LadderSessionResult,
    PaceGaugeResult,
    WorkbookConfig,
)
from .pace import calculate_all_paces

router = APIRouter(tags=["progress"])
logger = logging.getLogger(__name__)


class LadderSessionRequest(BaseModel):
    child_id: str = Field(..., min_length=1)
    progress: Optional[LadderProgress] = None
    session: LadderSessionInput


class PaceRequest(BaseModel):
    workbooks: List[WorkbookConfig] = Field(default_factory=list)
    today: Optional[date] = None
    planned_per_week: Dict[str, float] = Field(default_factory=dict)


@router.get("/api/ladders", response_model=List[LadderCardDefinition], status_code=status.HTTP_200_OK)
def list_ladders() -> List[LadderCardDefinition]:
    return list(LADDER_CATALOG)


@router.post(
    "/api/ladders/{ladder_key}/sessions",
    response_model=LadderSessionResult,
    status_code=status.HTTP_200_OK,
)
def log_ladder_session(ladder_key: str, payload: LadderSessionRequest) -> LadderSessionResult:
    ladder = get_ladder(ladder_key)
    if ladder is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown ladder '{ladder_key}'.")
    if payload.progress is not None and payload.progress.ladder_key != ladder_key:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Progress belongs to a different ladder.",
        )
    progress = ensure_progress(payload.progress, payload.child_id, ladder)
    return apply_session(progress, payload.session, ladder)


@router.post("/api/pace", response_model=List[PaceGaugeResult], status_code=status.HTTP_200_OK)
def pace(payload: PaceRequest) -> List[PaceGaugeResult]:
    today = payload.today or date.today()
    return calculate_all_paces(payload.workbooks, today, payload.planned_per_week)


__all__ = ["router"]
