# backend/app/database.py
"""SQLite engine and per-request sessions for the Ops API."""
import logging
import os
from typing import Generator

from sqlmodel import Session, SQLModel, create_engine

logger = logging.getLogger(__name__)

DB_FILE = os.environ.get("OPS_DB", "backend/ops_dashboard.db")

# FastAPI may hand a request to any worker thread
engine = create_engine(
    f"sqlite:///{DB_FILE}",
    connect_args={"check_same_thread": False},
)


def init_db(bind=None) -> None:
    """Create the site, drone, mission and telemetry tables on ``bind`` (default: ``engine``)."""
    from .models import Drone, Mission, Site, Telemetry  # noqa: F401
    target = engine if bind is None else bind
    SQLModel.metadata.create_all(target)
    logger.info("Database ready at %s", target.url)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
