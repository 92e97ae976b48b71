from datetime import datetime
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from tomorrow_architect.api import deps
from tomorrow_architect.core.errors import (
    AdvisorBusyError,
    EmptyPlanError,
    ScheduleOptimizationFailed,
)
from tomorrow_architect.schemas.advisor import OptimizeResponse, ReviewResponse, ScheduledTime
from tomorrow_architect.services.advisor import AdvisorService, OptimizationResult
from tomorrow_architect.services.day_window import DayWindow

router = APIRouter()


def _to_response(result: OptimizationResult) -> OptimizeResponse:
    return OptimizeResponse(
        start_time=result.start_time,
        message=result.message,
        scheduled=[
            ScheduledTime(id=task_id, suggested_time=label)
            for task_id, label in result.scheduled.items()
        ],
    )


def _raise_for(error: Exception) -> NoReturn:
    if isinstance(error, EmptyPlanError):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error))
    if isinstance(error, AdvisorBusyError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))


@router.post("/review", response_model=ReviewResponse)
def review_tomorrow(
    window: DayWindow = Depends(deps.get_day_window),
    advisor: AdvisorService = Depends(deps.get_advisor_service),
) -> ReviewResponse:
    try:
        result = advisor.review_tomorrow(window)
    except AdvisorBusyError as e:
        _raise_for(e)
    return ReviewResponse(review=result.text, fallback=result.fallback)


@router.post("/optimize-tomorrow", response_model=OptimizeResponse)
def optimize_tomorrow(
    window: DayWindow = Depends(deps.get_day_window),
    advisor: AdvisorService = Depends(deps.get_advisor_service),
) -> OptimizeResponse:
    try:
        result = advisor.optimize_tomorrow(window)
    except (EmptyPlanError, AdvisorBusyError, ScheduleOptimizationFailed) as e:
        _raise_for(e)
    return _to_response(result)


@router.post("/optimize-today", response_model=OptimizeResponse)
def optimize_today(
    now: datetime = Depends(deps.get_now),
    window: DayWindow = Depends(deps.get_day_window),
    advisor: AdvisorService = Depends(deps.get_advisor_service),
) -> OptimizeResponse:
    """Schedule today's unfinished tasks from the next quarter hour."""
    try:
        result = advisor.optimize_today(window, now)
    except (EmptyPlanError, AdvisorBusyError, ScheduleOptimizationFailed) as e:
        _raise_for(e)
    return _to_response(result)
