from datetime import datetime, timezone

from fastapi import Depends, Request

from tomorrow_architect.core.config import Settings
from tomorrow_architect.services.advisor import AdvisorService
from tomorrow_architect.services.day_window import DayWindow, resolve_day_window
from tomorrow_architect.services.persistence import PersistenceAdapter
from tomorrow_architect.services.task_store import TaskStore


def get_now() -> datetime:
    return datetime.now(timezone.utc)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> TaskStore:
    return request.app.state.store


def get_persistence(request: Request) -> PersistenceAdapter:
    return request.app.state.persistence


def get_advisor_service(request: Request) -> AdvisorService:
    return request.app.state.advisor


def get_day_window(
    now: datetime = Depends(get_now),
    settings: Settings = Depends(get_app_settings),
) -> DayWindow:
    return resolve_day_window(
        now,
        reference_offset_minutes=settings.reference_offset_minutes,
        night_owl_cutoff_hour=settings.night_owl_cutoff_hour,
    )
