"""Transactional alert store.

The store is the only reader and writer of the alert table. Every mutating
operation runs in exactly one transaction which is committed on success and
rolled back on every other exit path, including a failed commit or an
expired deadline. Sessions are always closed, returning their connection to
the pool.
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from alert_service.database.alerts.models import Alert
from alert_service.database.alerts.operations import (
    create_alert,
    delete_alert_by_id,
    get_alert_by_external_id,
    get_internal_id,
    update_alert_by_id,
)
from alert_service.database.connection import checkout_timeout
from alert_service.deadline import Deadline
from alert_service.exceptions import AlertNotFoundError, OperationCancelledError, StoreError
from alert_service.identifiers import generate_external_id

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Get the current time in UTC."""
    return datetime.now(UTC)


class AlertStore(ABC):
    """Capability set for reading and writing alerts.

    Implementations raise AlertNotFoundError when no alert matches an external
    id and StoreError for any other failure.
    """

    @abstractmethod
    def create(self, message: str, *, deadline: Deadline | None = None) -> Alert:
        """Create an alert with a fresh external id.

        :param message: Non-empty alert message (validated by the caller).
        :param deadline: Optional deadline for the operation.
        :returns: The persisted alert.
        """

    @abstractmethod
    def get_by_external_id(
        self,
        external_id: uuid.UUID,
        *,
        deadline: Deadline | None = None,
    ) -> Alert:
        """Get an alert by its external id.

        :param external_id: The external id.
        :param deadline: Optional deadline for the operation.
        :returns: The alert.
        :raises AlertNotFoundError: If no alert matches.
        """

    @abstractmethod
    def update_by_external_id(
        self,
        external_id: uuid.UUID,
        message: str,
        *,
        deadline: Deadline | None = None,
    ) -> Alert:
        """Replace an alert's message.

        :param external_id: The external id.
        :param message: The new message.
        :param deadline: Optional deadline for the operation.
        :returns: The alert after the update.
        :raises AlertNotFoundError: If no alert matches.
        """

    @abstractmethod
    def delete_by_external_id(
        self,
        external_id: uuid.UUID,
        *,
        deadline: Deadline | None = None,
    ) -> None:
        """Delete an alert.

        Deleting an alert that no longer exists raises, so a repeated delete
        is distinguishable from the first one.

        :param external_id: The external id.
        :param deadline: Optional deadline for the operation.
        :raises AlertNotFoundError: If no alert matches.
        """


class SQLAlchemyAlertStore(AlertStore):
    """AlertStore backed by a SQLAlchemy session factory.

    Update and delete resolve the external id with a locking read inside the
    same transaction as the write, so on PostgreSQL a concurrent delete cannot
    slip in between. The affected-row count is still checked so engines
    without row locks report a vanished row as not found.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialise the store.

        :param session_factory: Factory producing sessions bound to the database.
        :param clock: Source of timestamps for created_at/updated_at.
        """
        self._session_factory = session_factory
        self._clock = clock

    def create(self, message: str, *, deadline: Deadline | None = None) -> Alert:
        """Create an alert with a fresh external id."""
        external_id = generate_external_id()
        with self._transaction(deadline) as session:
            alert = create_alert(session, external_id, message, self._clock())

        logger.info(f"Created alert: external_id={alert.external_id}")
        return alert

    def get_by_external_id(
        self,
        external_id: uuid.UUID,
        *,
        deadline: Deadline | None = None,
    ) -> Alert:
        """Get an alert by its external id."""
        with self._transaction(deadline, read_only=True) as session:
            alert = get_alert_by_external_id(session, external_id)
            if alert is None:
                raise AlertNotFoundError(external_id)
        return alert

    def update_by_external_id(
        self,
        external_id: uuid.UUID,
        message: str,
        *,
        deadline: Deadline | None = None,
    ) -> Alert:
        """Replace an alert's message and bump updated_at."""
        with self._transaction(deadline) as session:
            internal_id = self._resolve_internal_id(session, external_id)
            alert = update_alert_by_id(session, internal_id, message, self._clock())
            if alert is None:
                raise AlertNotFoundError(external_id)

        logger.info(f"Updated alert: external_id={external_id}")
        return alert

    def delete_by_external_id(
        self,
        external_id: uuid.UUID,
        *,
        deadline: Deadline | None = None,
    ) -> None:
        """Physically delete an alert."""
        with self._transaction(deadline) as session:
            internal_id = self._resolve_internal_id(session, external_id)
            if not delete_alert_by_id(session, internal_id):
                raise AlertNotFoundError(external_id)

        logger.info(f"Deleted alert: external_id={external_id}")

    @staticmethod
    def _resolve_internal_id(session: Session, external_id: uuid.UUID) -> int:
        """Translate an external id into the locked row's internal key.

        :param session: Session of the current transaction.
        :param external_id: The external id.
        :returns: The internal id.
        :raises AlertNotFoundError: If no alert matches.
        """
        internal_id = get_internal_id(session, external_id, for_update=True)
        if internal_id is None:
            raise AlertNotFoundError(external_id)
        return internal_id

    @contextmanager
    def _transaction(
        self,
        deadline: Deadline | None,
        *,
        read_only: bool = False,
    ) -> Iterator[Session]:
        """Open a session whose transaction is committed only on success.

        Read-only transactions are never committed; closing the session ends
        them.

        :param deadline: Optional deadline, checked on entry and before commit. It
            also caps the wait for a pooled connection.
        :param read_only: Skip the commit.
        :yields: The session.
        :raises OperationCancelledError: If the deadline expires.
        :raises StoreError: If the database raises.
        """
        if deadline is None:
            deadline = Deadline.never()
        deadline.check()

        session = self._session_factory()
        try:
            _acquire_connection(session, deadline)
            _apply_statement_timeout(session, deadline)
            yield session
            if not read_only:
                deadline.check()
                session.commit()

        except SQLAlchemyError as e:
            session.rollback()
            if deadline.expired:
                raise OperationCancelledError("Operation deadline exceeded") from e
            logger.warning(f"Alert store database error: {type(e).__name__}")
            raise StoreError(str(e)) from e

        except BaseException:
            session.rollback()
            raise

        finally:
            session.close()


def _acquire_connection(session: Session, deadline: Deadline) -> None:
    """Check out the session's connection without waiting past the deadline.

    A pool timeout cut short by the deadline is a cancellation, not a store
    failure.

    :param session: Session of the current transaction.
    :param deadline: The caller's deadline.
    """
    remaining = deadline.remaining()
    try:
        with checkout_timeout(remaining):
            session.connection()
    except PoolTimeoutError as e:
        pool_timeout = getattr(session.get_bind().pool, "configured_timeout", None)
        if remaining is not None and pool_timeout is not None and remaining < pool_timeout:
            raise OperationCancelledError("Operation deadline exceeded") from e
        raise


def _apply_statement_timeout(session: Session, deadline: Deadline) -> None:
    """Bound server-side statement time by the deadline (PostgreSQL only).

    :param session: Session of the current transaction.
    :param deadline: The caller's deadline.
    """
    remaining = deadline.remaining()
    if remaining is None or session.get_bind().dialect.name != "postgresql":
        return

    timeout_ms = max(int(remaining * 1000), 1)
    session.execute(
        text("SELECT set_config('statement_timeout', :timeout, true)"),
        {"timeout": str(timeout_ms)},
    )
