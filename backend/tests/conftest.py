import itertools

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tomorrow_architect.db.base import Base
from tomorrow_architect.models.storage import StorageEntry  # noqa: F401
from tomorrow_architect.schemas.task import Task


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def make_task():
    counter = itertools.count(1)

    def _make(**fields) -> Task:
        number = next(counter)
        defaults = {
            "id": f"task-{number}",
            "content": f"Task {number}",
            "target_date": "2025-12-16",
            "created_at": 1765800000000 + number,
        }
        defaults.update(fields)
        return Task(**defaults)

    return _make
