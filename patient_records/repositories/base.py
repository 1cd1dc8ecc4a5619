"""
Shared persistence helpers for SQLAlchemy-backed repositories.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The database rejected or failed an operation."""


class DuplicateRecordError(StorageError):
    """A unique constraint was violated."""


def _describe(exc: SQLAlchemyError) -> str:
    original = getattr(exc, "orig", None)
    return str(original) if original is not None else str(exc)


UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports SQLSTATE 23505 for the failed statement."""
    original = getattr(exc, "orig", None)
    for candidate in (original, getattr(original, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code == UNIQUE_VIOLATION:
            return True
    return False


class SqlRepository:
    """Base class owning the request session and error translation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _writing(self) -> AsyncIterator[None]:
        """Commit on success; roll back and translate driver errors."""
        try:
            yield
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            if _is_unique_violation(exc):
                raise DuplicateRecordError(_describe(exc)) from exc
            logger.error("Database write failed: %s", _describe(exc))
            raise StorageError(_describe(exc)) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("Database write failed: %s", _describe(exc))
            raise StorageError(_describe(exc)) from exc

    @asynccontextmanager
    async def _reading(self) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error("Database read failed: %s", _describe(exc))
            raise StorageError(_describe(exc)) from exc
