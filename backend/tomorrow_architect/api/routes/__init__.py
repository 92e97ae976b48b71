from fastapi import APIRouter

from tomorrow_architect.api.routes import (
    advisor,
    days,
    tasks,
    transfer,
)


api_router = APIRouter()
api_router.include_router(days.router, prefix="/days", tags=["days"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(advisor.router, prefix="/advisor", tags=["advisor"])
api_router.include_router(transfer.router, prefix="/transfer", tags=["transfer"])
