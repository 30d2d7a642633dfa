"""Errors raised by the persistence layer.

The API layer maps these onto HTTP status codes; nothing below it retries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    pass


class NotFoundError(PersistenceError, LookupError):
    """Target record is absent or lives outside the requested scope."""


class ConflictError(PersistenceError):
    """A constraint was violated, e.g. a second active record in one scope."""


class StorageError(PersistenceError):
    """The database could not be reached or the statement failed."""


@contextmanager
def storage_guard(session: Session, action: str) -> Iterator[None]:
    """Roll back and re-raise SQLAlchemy failures as persistence errors."""
    try:
        yield
    except PersistenceError:
        session.rollback()
        raise
    except IntegrityError as exc:
        session.rollback()
        logger.warning("%s violated a constraint: %s", action, exc.orig)
        raise ConflictError(f"{action} violated a constraint") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("%s failed: %s", action, exc)
        raise StorageError(f"{action} failed") from exc
