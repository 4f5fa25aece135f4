from __future__ import annotations
import os
import logging
from contextlib import contextmanager
from typing import Iterator
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine, select

from .accounts.models import User
from .projects.models import Project  # noqa: F401  (registers the table)
from .exceptions import StorageError
from .models import ADMIN_ROLE

logger = logging.getLogger(__name__)

DB_URL = os.getenv("ISSUES_DB_URL", "sqlite:///issues.db")
engine = create_engine(DB_URL, connect_args={"check_same_thread": False} if DB_URL.startswith("sqlite") else {})

ADMIN_USERNAME = "Admin"
ADMIN_SEED = {
    "email": "admin@example.com",
    "username": ADMIN_USERNAME,
    "password": "123123",
    "role": ADMIN_ROLE,
}


def seed_admin(s: Session) -> bool:
    """Create the Admin account unless one exists. Returns True if created."""
    if s.exec(select(User).where(User.username == ADMIN_USERNAME)).first() is not None:
        return False
    s.add(User(**ADMIN_SEED))
    s.commit()
    logger.info("Seeded %s account", ADMIN_USERNAME)
    return True


def init_db() -> None:
    SQLModel.metadata.create_all(engine)
    with get_session() as s:
        seed_admin(s)


@contextmanager
def get_session() -> Iterator[Session]:
    with Session(engine) as s:
        try:
            yield s
        except SQLAlchemyError as e:
            s.rollback()
            logger.error("Store operation failed: %s", e)
            raise StorageError(f"Storage operation failed: {type(e).__name__}", operation=type(e).__name__) from e
