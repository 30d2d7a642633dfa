from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, Update, select, update
from sqlalchemy.orm import Session

from portfolio.db.errors import ConflictError, NotFoundError, storage_guard
from portfolio.db.models import ResumeUpload, Video

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", ResumeUpload, Video)


class ActiveRecordSelector(Generic[RecordT]):
    """Keeps at most one row with ``is_active`` set inside a scope.

    ``scope_column`` names the owning column of the model (``user_id`` for
    resumes). When it is ``None`` the whole table is one scope and the
    ``scope`` argument of every operation is ignored.

    Activation runs as a single transaction: lock the target, clear every
    other active row in scope, flag the target, commit. The partial unique
    index on the table turns a lost race into a ``ConflictError`` rather than
    two active rows.
    """

    def __init__(
        self,
        session: Session,
        model: type[RecordT],
        *,
        scope_column: str | None = None,
        order_column: str = "created_at",
    ):
        self.session = session
        self.model = model
        self.scope_column = scope_column
        self.order_column = order_column

    @property
    def _label(self) -> str:
        return self.model.__tablename__

    def _scoped(self, statement: Select | Update, scope: Any) -> Any:
        if self.scope_column is None:
            return statement
        return statement.where(getattr(self.model, self.scope_column) == scope)

    def _scope_of(self, record: RecordT) -> Any:
        if self.scope_column is None:
            return None
        return getattr(record, self.scope_column)

    def _guard(self, action: str) -> AbstractContextManager[None]:
        return storage_guard(self.session, f"{action} on {self._label}")

    def _deactivate_all(self, scope: Any, *, keep_id: str | None = None) -> None:
        statement = update(self.model).where(self.model.is_active.is_(True))
        if keep_id is not None:
            statement = statement.where(self.model.id != keep_id)
        self.session.execute(self._scoped(statement, scope).values(is_active=False))

    def create(self, record: RecordT, *, activate: bool = False) -> RecordT:
        with self._guard("create"):
            if activate:
                self._deactivate_all(self._scope_of(record))
            record.is_active = activate
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
        if activate:
            logger.info("Created active %s row %s", self._label, record.id)
        return record

    def list(self, scope: Any = None) -> list[RecordT]:
        order = getattr(self.model, self.order_column)
        statement = (
            self._scoped(select(self.model), scope)
            .order_by(order.desc())
            .execution_options(populate_existing=True)
        )
        with self._guard("list"):
            return list(self.session.scalars(statement).all())

    def _by_id(self, scope: Any, record_id: str) -> Select:
        statement = select(self.model).where(self.model.id == record_id)
        return self._scoped(statement, scope).execution_options(populate_existing=True)

    def get(self, scope: Any, record_id: str) -> RecordT | None:
        with self._guard("get"):
            return self.session.scalar(self._by_id(scope, record_id))

    def get_active(self, scope: Any = None) -> RecordT | None:
        statement = self._scoped(select(self.model).where(self.model.is_active.is_(True)), scope)
        statement = statement.limit(2).execution_options(populate_existing=True)
        with self._guard("get_active"):
            rows = list(self.session.scalars(statement).all())
            if len(rows) > 1:
                raise ConflictError(f"more than one active row in {self._label} for scope {scope!r}")
        return rows[0] if rows else None

    def set_active(self, scope: Any, record_id: str) -> RecordT:
        with self._guard("set_active"):
            target = self.session.scalar(self._by_id(scope, record_id).with_for_update())
            if target is None:
                raise NotFoundError(f"{self._label} row {record_id} not found")

            self._deactivate_all(scope, keep_id=record_id)
            self.session.execute(
                update(self.model).where(self.model.id == record_id).values(is_active=True)
            )
            self.session.commit()
            self.session.refresh(target)
        logger.info("Activated %s row %s", self._label, record_id)
        return target

    def delete(self, scope: Any, record_id: str) -> RecordT:
        """Remove a row; an active row leaves its scope with nothing active."""
        with self._guard("delete"):
            target = self.session.scalar(self._by_id(scope, record_id))
            if target is None:
                raise NotFoundError(f"{self._label} row {record_id} not found")
            self.session.delete(target)
            self.session.commit()
        logger.info("Deleted %s row %s (was_active=%s)", self._label, record_id, target.is_active)
        return target
