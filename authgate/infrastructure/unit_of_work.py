# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-call transactional scope for the SQLAlchemy repositories."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from authgate.shared.errors.base import StorageError
from authgate.shared.logging import logger


@dataclass(slots=True)
class SqlAlchemyUnitOfWork(AbstractContextManager):
    """Commits on clean exit, rolls back otherwise; read-only scopes never commit."""

    session_factory: Callable[[], Session]
    operation: str = "db"
    read_only: bool = False
    _session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._session is None:
            return
        try:
            if exc is not None or self.read_only:
                self._session.rollback()
            else:
                self._session.commit()
                logger.debug(f"uow: {self.operation} committed")
        except Exception:
            self._session.rollback()
            raise
        finally:
            self._session.close()
            self._session = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("UnitOfWork session accessed before entering context")
        return self._session


@contextmanager
def unit_of_work_scope(
    factory: Callable[[], Session], operation: str = "db", *, read_only: bool = False
) -> Iterator[Session]:
    """Yield a session; driver errors surface as ``StorageError``."""

    try:
        with SqlAlchemyUnitOfWork(factory, operation, read_only) as uow:
            yield uow.session
    except SQLAlchemyError as exc:
        logger.error(f"uow: {operation} failed with {type(exc).__name__}")
        raise StorageError() from exc


__all__ = ["SqlAlchemyUnitOfWork", "unit_of_work_scope"]
