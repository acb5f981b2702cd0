# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository base: connection scoping and SQLAlchemy error translation.
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from reviewer_service.core.logging import get_logger
from reviewer_service.models.errors import StorageError

logger = get_logger(__name__)

_CONFLICT_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


class BaseRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    @contextmanager
    def _transaction(self, action: str) -> Iterator[Connection]:
        """Run a block in one transaction; driver failures become StorageError."""
        try:
            with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as exc:
            logger.error("Storage failure while %s: %s", action, exc)
            raise StorageError(f"storage failure while {action}") from exc

    @contextmanager
    def _connection(self, action: str) -> Iterator[Connection]:
        try:
            with self._engine.connect() as conn:
                yield conn
        except SQLAlchemyError as exc:
            logger.error("Storage failure while %s: %s", action, exc)
            raise StorageError(f"storage failure while {action}") from exc


def insert_ignoring_conflicts(conn: Connection, table, rows: list[dict], index_elements: list[str]):
    """INSERT ... ON CONFLICT DO NOTHING for the dialects we run on."""
    dialect_insert = _CONFLICT_INSERTS.get(conn.dialect.name)
    if dialect_insert is None:
        raise StorageError(f"unsupported database dialect: {conn.dialect.name}")
    stmt = dialect_insert(table).values(rows).on_conflict_do_nothing(
        index_elements=index_elements
    )
    return conn.execute(stmt)
