"""Data store gateway used by every service.

The gateway is a thin wrapper around a SQLAlchemy session. Services hand it
Core statements (parameters are always bound, never interpolated) and get
rows back; driver failures come back as ``DataStoreError`` annotated with
the operation's log message and identifiers.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable

from comic_cms.core.errors import DataStoreError

__all__ = ["BatchStatement", "DataStore"]

Params = Mapping[str, Any] | Sequence[Mapping[str, Any]] | None


@dataclass(frozen=True)
class BatchStatement:
    """One statement of an all-or-nothing batch."""

    statement: Executable
    params: Params = None
    error_log_message: str | None = None


class DataStore:
    """Executes parameterized statements against one session."""

    def __init__(self, session: Session) -> None:
        """Initialize the gateway with a SQLAlchemy session."""
        self.session = session
        self._depth = 0

    def execute(
        self,
        statement: Executable,
        params: Params = None,
        *,
        error_message: str = "Error executing query",
        **context: Any,
    ) -> Result[Any]:
        """Execute a single statement and return its result."""
        try:
            return self.session.execute(statement, params)
        except SQLAlchemyError as exc:
            raise DataStoreError(error_message, **context) from exc

    def execute_batch(
        self,
        statements: Sequence[BatchStatement],
        *,
        error_message: str = "Error executing batched queries",
        **context: Any,
    ) -> None:
        """Execute ``statements`` atomically.

        Either every statement is applied or none is. When called inside an
        open ``transaction()`` the batch joins that transaction instead of
        committing on its own.
        """
        if not statements:
            return
        with self.transaction(error_message, **context):
            for item in statements:
                try:
                    self.session.execute(item.statement, item.params)
                except SQLAlchemyError as exc:
                    raise DataStoreError(
                        item.error_log_message or error_message,
                        **context,
                    ) from exc

    def commit(self, error_message: str = "Error committing transaction", **context: Any) -> None:
        """Commit pending work unless a ``transaction()`` block is open."""
        if self._depth:
            return
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise DataStoreError(error_message, **context) from exc

    @contextmanager
    def transaction(
        self,
        error_message: str = "Error committing transaction",
        **context: Any,
    ) -> Iterator[DataStore]:
        """Group writes into one transaction.

        The outermost block commits on success and rolls back on any error.
        Nested blocks join the outer transaction.
        """
        outermost = self._depth == 0
        self._depth += 1
        try:
            yield self
            if outermost:
                self.session.commit()
        except SQLAlchemyError as exc:
            if outermost:
                self.session.rollback()
            raise DataStoreError(error_message, **context) from exc
        except BaseException:
            if outermost:
                self.session.rollback()
            raise
        finally:
            self._depth -= 1
