import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from tomorrow_architect.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

is_sqlite = settings.database_url.startswith("sqlite")
connect_args = {"check_same_thread": False} if is_sqlite else {}
logger.debug(f"Storage backend: {'SQLite' if is_sqlite else 'PostgreSQL'}")
engine = create_engine(
    settings.database_url,
    connect_args=connect_args
)

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)
