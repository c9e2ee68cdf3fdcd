from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from ..models import db as _db_models  # noqa: F401 - ensure models register with metadata
from .errors import StorageError


logger = logging.getLogger(__name__)

_UNIT_DEPTH_KEY = "unit_of_work_depth"


def create_engine_for_url(database_url: str) -> Engine:
    connect_args: dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    return create_engine(database_url, echo=False, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


def get_session(request: Request) -> Generator[Session, None, None]:
    with Session(request.app.state.engine) as session:
        yield session


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """Run the enclosed block as a single transaction on ``session``.

    Units nest: an inner unit joins the outermost one and only the outermost
    commits. Any exception rolls the whole unit back; SQLAlchemy failures
    (including a failed commit) are re-raised as :class:`StorageError`.
    """
    depth = session.info.get(_UNIT_DEPTH_KEY, 0)
    session.info[_UNIT_DEPTH_KEY] = depth + 1
    try:
        yield session
        if depth == 0:
            session.commit()
    except SQLAlchemyError as exc:
        if depth:
            raise
        session.rollback()
        logger.warning("storage.rolled_back", extra={"error": str(exc)})
        raise StorageError("Storage operation failed") from exc
    except Exception:
        if depth == 0:
            session.rollback()
        raise
    finally:
        session.info[_UNIT_DEPTH_KEY] = depth
