"""Behaviour tests for the alert store against an in-memory SQLite database."""

import time
import unittest
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from alert_service.database.alerts.models import Alert
from alert_service.database.alerts.store import SQLAlchemyAlertStore
from alert_service.database.connection import DeadlineQueuePool, create_session_factory
from alert_service.database.core import Base
from alert_service.deadline import Deadline
from alert_service.exceptions import AlertNotFoundError, OperationCancelledError, StoreError


class _TickingClock:
    """Clock that advances one second per reading."""

    def __init__(self, start: datetime) -> None:
        self._now = start

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


def _as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo on the way back; stored values are UTC wall time."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class TestSQLiteAlertStore(unittest.TestCase):
    """Tests for SQLAlchemyAlertStore against a real database engine."""

    def setUp(self) -> None:
        """Create a fresh schema and store."""
        self.engine = create_engine(
            "sqlite://",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        Base.metadata.create_all(self.engine)
        self.session_factory = create_session_factory(self.engine)
        self.store = SQLAlchemyAlertStore(
            self.session_factory,
            clock=_TickingClock(datetime(2025, 1, 15, 9, 0, tzinfo=UTC)),
        )

    def tearDown(self) -> None:
        """Dispose of the engine."""
        self.engine.dispose()

    def _row_count(self) -> int:
        with self.session_factory() as session:
            return session.query(Alert).count()

    def test_create_stamps_equal_timestamps_and_unique_ids(self) -> None:
        """Test that every create has created_at == updated_at and a new external id."""
        alerts = [self.store.create(f"alert {i}") for i in range(25)]

        for alert in alerts:
            self.assertEqual(alert.created_at, alert.updated_at)
        self.assertEqual(len({alert.external_id for alert in alerts}), 25)
        self.assertEqual(self._row_count(), 25)

    def test_internal_ids_are_sequential_and_unrelated_to_external_ids(self) -> None:
        """Test that the store assigns increasing internal keys."""
        first = self.store.create("first")
        second = self.store.create("second")

        self.assertEqual(second.internal_id, first.internal_id + 1)
        self.assertNotEqual(first.external_id.int, first.internal_id)

    def test_get_returns_persisted_values(self) -> None:
        """Test that a read after create returns the same message and timestamps."""
        created = self.store.create("Hello there")

        fetched = self.store.get_by_external_id(created.external_id)

        self.assertEqual(fetched.external_id, created.external_id)
        self.assertEqual(fetched.message, "Hello there")
        self.assertEqual(_as_utc(fetched.created_at), created.created_at)
        self.assertEqual(_as_utc(fetched.updated_at), created.updated_at)

    def test_update_changes_message_and_updated_at_only(self) -> None:
        """Test that update bumps updated_at and leaves identifiers and created_at."""
        created = self.store.create("Hello there")

        updated = self.store.update_by_external_id(
            created.external_id, "Steven why are you like this"
        )

        self.assertEqual(updated.message, "Steven why are you like this")
        self.assertGreater(updated.updated_at, updated.created_at)
        self.assertEqual(updated.external_id, created.external_id)
        self.assertEqual(updated.internal_id, created.internal_id)
        self.assertEqual(_as_utc(updated.created_at), created.created_at)

        fetched = self.store.get_by_external_id(created.external_id)
        self.assertEqual(fetched.message, "Steven why are you like this")

    def test_delete_removes_row(self) -> None:
        """Test that delete is physical and later reads fail."""
        created = self.store.create("Hello there")

        self.store.delete_by_external_id(created.external_id)

        self.assertEqual(self._row_count(), 0)
        with self.assertRaises(AlertNotFoundError):
            self.store.get_by_external_id(created.external_id)

    def test_second_delete_raises_not_found(self) -> None:
        """Test that deletion is not silently idempotent."""
        created = self.store.create("Hello there")
        self.store.delete_by_external_id(created.external_id)

        with self.assertRaises(AlertNotFoundError):
            self.store.delete_by_external_id(created.external_id)

    def test_never_created_id_raises_not_found(self) -> None:
        """Test update and delete against a valid but unknown external id."""
        self.store.create("unrelated")
        unknown = uuid4()

        with self.assertRaises(AlertNotFoundError):
            self.store.update_by_external_id(unknown, "new message")
        with self.assertRaises(AlertNotFoundError):
            self.store.delete_by_external_id(unknown)
        with self.assertRaises(AlertNotFoundError):
            self.store.get_by_external_id(unknown)

        self.assertEqual(self._row_count(), 1)

    def test_failed_insert_leaves_no_row(self) -> None:
        """Test that a constraint violation is rolled back and classified."""
        with self.assertRaises(StoreError):
            self.store.create(None)  # type: ignore[arg-type]

        self.assertEqual(self._row_count(), 0)

    def test_other_rows_unaffected_by_update_and_delete(self) -> None:
        """Test that writes are keyed to exactly one row."""
        keep = self.store.create("keep me")
        change = self.store.create("change me")

        self.store.update_by_external_id(change.external_id, "changed")
        self.store.delete_by_external_id(change.external_id)

        fetched = self.store.get_by_external_id(keep.external_id)
        self.assertEqual(fetched.message, "keep me")
        self.assertEqual(_as_utc(fetched.updated_at), keep.updated_at)

    def test_alert_lifecycle_scenario(self) -> None:
        """Test create, update and delete of a single alert end to end."""
        created = self.store.create("Hello there")
        self.assertEqual(created.message, "Hello there")
        self.assertEqual(created.created_at, created.updated_at)

        updated = self.store.update_by_external_id(
            created.external_id, "Steven why are you like this"
        )
        self.assertEqual(updated.message, "Steven why are you like this")
        self.assertGreater(updated.updated_at, updated.created_at)

        self.store.delete_by_external_id(created.external_id)
        with self.assertRaises(AlertNotFoundError):
            self.store.get_by_external_id(created.external_id)


class TestExhaustedPool(unittest.TestCase):
    """Tests for deadlines while every pooled connection is in use."""

    def setUp(self) -> None:
        """Create a single-connection pool and hold its only connection."""
        self.engine = create_engine(
            "sqlite://",
            poolclass=DeadlineQueuePool,
            pool_size=1,
            max_overflow=0,
            pool_timeout=3,
            connect_args={"check_same_thread": False},
        )
        Base.metadata.create_all(self.engine)
        self.store = SQLAlchemyAlertStore(create_session_factory(self.engine))
        self.held = self.engine.connect()

    def tearDown(self) -> None:
        """Release the held connection and dispose of the engine."""
        self.held.close()
        self.engine.dispose()

    def test_checkout_wait_stops_at_deadline(self) -> None:
        """Test that waiting for a connection does not outlive the deadline."""
        start = time.monotonic()

        with self.assertRaises(OperationCancelledError):
            self.store.create("x", deadline=Deadline.after(0.2))

        self.assertLess(time.monotonic() - start, 1.0)

    def test_store_usable_once_connection_released(self) -> None:
        """Test that the pool recovers after a deadline-limited checkout fails."""
        with self.assertRaises(OperationCancelledError):
            self.store.get_by_external_id(uuid4(), deadline=Deadline.after(0.1))

        self.held.close()
        alert = self.store.create("x", deadline=Deadline.after(2))

        self.assertEqual(alert.message, "x")


if __name__ == "__main__":
    unittest.main()
