from dataclasses import asdict

from fastapi import APIRouter, Depends

from tomorrow_architect.api import deps
from tomorrow_architect.schemas.day import DayWindowPublic, ProgressPublic
from tomorrow_architect.services.advisor import ActionKind, AdvisorService
from tomorrow_architect.services.day_window import DayWindow
from tomorrow_architect.services.progress import progress
from tomorrow_architect.services.task_store import TaskStore

router = APIRouter()


@router.get("/window", response_model=DayWindowPublic)
def get_day_window(
    window: DayWindow = Depends(deps.get_day_window),
    store: TaskStore = Depends(deps.get_store),
    advisor: AdvisorService = Depends(deps.get_advisor_service),
) -> DayWindowPublic:
    today = progress(store.filter_by_day(window.today_key))
    tomorrow = progress(store.filter_by_day(window.tomorrow_key))
    return DayWindowPublic(
        today_key=window.today_key,
        tomorrow_key=window.tomorrow_key,
        today_label=window.today_label,
        tomorrow_label=window.tomorrow_label,
        today_progress=ProgressPublic(**asdict(today)),
        tomorrow_progress=ProgressPublic(**asdict(tomorrow)),
        advisor_busy=[kind.value for kind in ActionKind if advisor.is_busy(kind)],
    )
