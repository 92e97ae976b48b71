import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from tomorrow_architect.api import deps
from tomorrow_architect.core.errors import TaskValidationError
from tomorrow_architect.schemas.task import (
    DAY_PATTERN,
    Task,
    TaskCreate,
    TaskMoveRequest,
    TaskMoveResponse,
    check_day_key,
)
from tomorrow_architect.services.day_window import DayWindow
from tomorrow_architect.services.ordering import sort_today, sort_tomorrow
from tomorrow_architect.services.task_store import TaskStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[Task])
def list_tasks(
    day: str = Query(
        default="tomorrow",
        pattern=DAY_PATTERN,
        description="today, tomorrow or a YYYY-MM-DD key",
    ),
    window: DayWindow = Depends(deps.get_day_window),
    store: TaskStore = Depends(deps.get_store),
) -> list[Task]:
    """List one day's tasks in display order."""
    try:
        check_day_key(day)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown day: {day}",
        )
    day_key = window.resolve(day)
    tasks = store.filter_by_day(day_key)
    # Only the today view sinks completed tasks
    if day_key == window.today_key:
        return sort_today(tasks)
    return sort_tomorrow(tasks)


@router.post("/", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    window: DayWindow = Depends(deps.get_day_window),
    store: TaskStore = Depends(deps.get_store),
) -> Task:
    target_date = window.resolve(payload.target_date or "tomorrow")
    try:
        return store.add(
            content=payload.content,
            target_date=target_date,
            priority=payload.priority,
            category=payload.category,
            estimated_duration=payload.estimated_duration,
        )
    except TaskValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )


@router.post("/move", response_model=TaskMoveResponse)
def move_tasks(
    payload: TaskMoveRequest,
    window: DayWindow = Depends(deps.get_day_window),
    store: TaskStore = Depends(deps.get_store),
) -> TaskMoveResponse:
    target_date = window.resolve(payload.target_date)
    moved = store.move_to_day(payload.ids, target_date)
    return TaskMoveResponse(moved=moved, target_date=target_date)


@router.post("/move-unfinished", response_model=TaskMoveResponse)
def move_unfinished_to_tomorrow(
    window: DayWindow = Depends(deps.get_day_window),
    store: TaskStore = Depends(deps.get_store),
) -> TaskMoveResponse:
    """Carry today's open tasks over to tomorrow."""
    unfinished = store.unfinished(window.today_key)
    moved = store.move_to_day([task.id for task in unfinished], window.tomorrow_key)
    return TaskMoveResponse(moved=moved, target_date=window.tomorrow_key)


@router.post("/{task_id}/toggle", response_model=Task)
def toggle_task(
    task_id: str,
    store: TaskStore = Depends(deps.get_store),
) -> Task:
    task = store.toggle(task_id)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    store: TaskStore = Depends(deps.get_store),
) -> Response:
    if not store.delete(task_id):
        logger.warning(f"Task not found for delete: task_id={task_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
