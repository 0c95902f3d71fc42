"""Shared helpers for repositories."""

import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ConflictOrStoreError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def store_errors(session: AsyncSession, action: str):
    """Roll back and re-raise store failures as ConflictOrStoreError.

    IntegrityError is re-raised untouched so services can turn uniqueness
    violations into their own domain error.
    """
    try:
        yield
    except IntegrityError:
        await session.rollback()
        raise
    except SQLAlchemyError as e:
        logger.error(f"Store error while {action}: {e}")
        await session.rollback()
        raise ConflictOrStoreError(f"Store error while {action}") from e
