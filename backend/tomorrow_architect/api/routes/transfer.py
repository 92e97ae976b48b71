import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status

from tomorrow_architect.api import deps
from tomorrow_architect.core.errors import ImportFormatError
from tomorrow_architect.db.seed import seed_tasks
from tomorrow_architect.schemas.transfer import ConfirmRequest, ImportRequest, ReplaceResponse
from tomorrow_architect.services.day_window import DayWindow
from tomorrow_architect.services.persistence import PersistenceAdapter
from tomorrow_architect.services.task_store import TaskStore
from tomorrow_architect.services.transfer import export_json, export_seed_module, parse_import

logger = logging.getLogger(__name__)

router = APIRouter()

CONFIRMATION_REQUIRED = "This will replace all current tasks. Resend with confirm=true to continue."


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/export")
def export_backup(
    now: datetime = Depends(deps.get_now),
    store: TaskStore = Depends(deps.get_store),
) -> Response:
    filename = f"tomorrows-architect-backup-{now.strftime('%Y-%m-%d')}.json"
    return Response(
        content=export_json(store.all()),
        media_type="application/json",
        headers=_attachment(filename),
    )


@router.get("/export-seed")
def export_seed(
    now: datetime = Depends(deps.get_now),
    store: TaskStore = Depends(deps.get_store),
) -> Response:
    """Source for db/seed.py built from the current tasks."""
    filename = f"seed-{now.strftime('%Y-%m-%d_%H-%M')}.py"
    return Response(
        content=export_seed_module(store.all()),
        media_type="text/x-python",
        headers=_attachment(filename),
    )


@router.post("/import", response_model=ReplaceResponse)
def import_backup(
    payload: ImportRequest,
    store: TaskStore = Depends(deps.get_store),
) -> ReplaceResponse:
    try:
        tasks = parse_import(payload.payload)
    except ImportFormatError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not payload.confirm:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=CONFIRMATION_REQUIRED)
    count = store.replace_all(tasks)
    logger.info(f"Imported {count} task(s)")
    return ReplaceResponse(count=count, message="Data restored successfully!")


@router.post("/reset", response_model=ReplaceResponse)
def reset_to_seed(
    payload: ConfirmRequest,
    window: DayWindow = Depends(deps.get_day_window),
    store: TaskStore = Depends(deps.get_store),
    persistence: PersistenceAdapter = Depends(deps.get_persistence),
) -> ReplaceResponse:
    if not payload.confirm:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=CONFIRMATION_REQUIRED)
    persistence.clear()
    count = store.replace_all(seed_tasks(window.tomorrow_key))
    return ReplaceResponse(count=count, message="Reset to initial data!")
