"""Database package for alerts."""

from alert_service.database.alerts.models import Alert
from alert_service.database.alerts.operations import (
    create_alert,
    delete_alert_by_id,
    get_alert_by_external_id,
    get_internal_id,
    update_alert_by_id,
)
from alert_service.database.alerts.store import AlertStore, SQLAlchemyAlertStore

__all__ = [
    # Models
    "Alert",
    # Operations
    "create_alert",
    "delete_alert_by_id",
    "get_alert_by_external_id",
    "get_internal_id",
    "update_alert_by_id",
    # Stores
    "AlertStore",
    "SQLAlchemyAlertStore",
]
