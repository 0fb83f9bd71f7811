"""Shared dependencies for API endpoints."""

import logging
from functools import lru_cache

from fastapi import Depends

from alert_service.config import AlertServiceConfig, get_config
from alert_service.database.alerts import AlertStore, SQLAlchemyAlertStore
from alert_service.database.connection import get_session_factory
from alert_service.deadline import Deadline

logger = logging.getLogger(__name__)


@lru_cache
def get_alert_store() -> AlertStore:
    """Get the process-wide alert store.

    :returns: A store bound to the shared connection pool.
    """
    logger.debug("Creating SQLAlchemy alert store")
    return SQLAlchemyAlertStore(get_session_factory())


def get_request_deadline(config: AlertServiceConfig = Depends(get_config)) -> Deadline:
    """Create the deadline applied to store calls made by one request.

    :param config: Application configuration.
    :returns: A deadline of ``request_timeout_seconds`` from now.
    """
    return Deadline.after(config.request_timeout_seconds)
