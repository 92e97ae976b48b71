import logging
from datetime import datetime, timezone
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from tomorrow_architect.advisor.adapter import AdvisorAdapter
from tomorrow_architect.advisor.factory import get_advisor_adapter, make_advisor_adapter
from tomorrow_architect.api.routes import api_router
from tomorrow_architect.core.config import Settings, get_settings
from tomorrow_architect.services.advisor import AdvisorService
from tomorrow_architect.services.day_window import resolve_day_window
from tomorrow_architect.services.persistence import PersistenceAdapter
from tomorrow_architect.services.task_store import TaskStore

logger = logging.getLogger(__name__)


def _default_adapter(settings: Settings) -> AdvisorAdapter:
    # Environment settings share the process-wide cached adapter
    if settings is get_settings():
        return get_advisor_adapter()
    return make_advisor_adapter(settings)


def create_app(
    settings: Settings | None = None,
    session_factory: Callable[[], Session] | None = None,
    advisor_adapter: AdvisorAdapter | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    if session_factory is None:
        from tomorrow_architect.db.base import Base
        from tomorrow_architect.db.session import SessionLocal, engine

        Base.metadata.create_all(bind=engine)
        session_factory = SessionLocal

    persistence = PersistenceAdapter(session_factory, settings.storage_key)
    window = resolve_day_window(
        datetime.now(timezone.utc),
        reference_offset_minutes=settings.reference_offset_minutes,
        night_owl_cutoff_hour=settings.night_owl_cutoff_hour,
    )
    tasks = persistence.load(window.tomorrow_key)
    store = TaskStore(tasks, on_change=persistence.save)
    logger.info(f"Loaded {len(store)} task(s); today is {window.today_key}")

    app = FastAPI(
        title="Tomorrow Architect",
        docs_url="/docs" if settings.environment == "development" else None,
        redoc_url="/redoc" if settings.environment == "development" else None,
    )
    app.state.settings = settings
    app.state.persistence = persistence
    app.state.store = store
    app.state.advisor = AdvisorService(
        advisor_adapter or _default_adapter(settings),
        store,
        reference_offset_minutes=settings.reference_offset_minutes,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
