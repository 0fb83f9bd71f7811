"""Database operations for alerts.

These functions run inside a session owned by the caller and never commit;
transaction boundaries belong to the store.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime

from sqlalchemy.orm import Session

from alert_service.database.alerts.models import Alert

logger = logging.getLogger(__name__)


def create_alert(
    session: Session,
    external_id: uuid.UUID,
    message: str,
    now: datetime,
) -> Alert:
    """Insert a new alert.

    :param session: Database session.
    :param external_id: Freshly generated external id.
    :param message: Alert message.
    :param now: Timestamp for both created_at and updated_at.
    :returns: The created alert with its internal id assigned.
    """
    alert = Alert(
        external_id=external_id,
        created_at=now,
        updated_at=now,
        message=message,
    )
    session.add(alert)
    session.flush()
    logger.debug(f"Inserted alert: external_id={external_id}")
    return alert


def get_alert_by_external_id(
    session: Session,
    external_id: uuid.UUID,
) -> Alert | None:
    """Get an alert by its external id.

    :param session: Database session.
    :param external_id: External id to look up.
    :returns: The alert or None if not found.
    """
    return session.query(Alert).filter(Alert.external_id == external_id).one_or_none()


def get_internal_id(
    session: Session,
    external_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> int | None:
    """Translate an external id into the internal key.

    :param session: Database session.
    :param external_id: External id to resolve.
    :param for_update: Lock the row until the transaction ends.
    :returns: The internal id or None if not found.
    """
    query = session.query(Alert.internal_id).filter(Alert.external_id == external_id)
    if for_update:
        query = query.with_for_update()
    return query.scalar()


def update_alert_by_id(
    session: Session,
    internal_id: int,
    message: str,
    now: datetime,
) -> Alert | None:
    """Update an alert's message and updated_at by internal id.

    :param session: Database session.
    :param internal_id: Internal key of the alert.
    :param message: New message.
    :param now: New updated_at value.
    :returns: The re-fetched alert, or None if no row was updated.
    """
    updated = (
        session.query(Alert)
        .filter(Alert.internal_id == internal_id)
        .update(
            {Alert.message: message, Alert.updated_at: now},
            synchronize_session=False,
        )
    )
    if updated == 0:
        return None

    logger.debug(f"Updated alert row: rows={updated}")
    return (
        session.query(Alert)
        .populate_existing()
        .filter(Alert.internal_id == internal_id)
        .one()
    )


def delete_alert_by_id(
    session: Session,
    internal_id: int,
) -> bool:
    """Physically delete an alert by internal id.

    :param session: Database session.
    :param internal_id: Internal key of the alert.
    :returns: True if a row was deleted.
    """
    deleted = (
        session.query(Alert)
        .filter(Alert.internal_id == internal_id)
        .delete(synchronize_session=False)
    )
    return deleted > 0
