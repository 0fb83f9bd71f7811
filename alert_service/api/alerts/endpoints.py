"""API endpoints for the alert resource."""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from alert_service.api.alerts.models import AlertResponse, CreateAlertRequest, UpdateAlertRequest
from alert_service.api.dependencies import get_alert_store, get_request_deadline
from alert_service.database.alerts import AlertStore
from alert_service.deadline import Deadline
from alert_service.exceptions import (
    AlertNotFoundError,
    ExternalIDParseError,
    OperationCancelledError,
    StoreError,
)
from alert_service.identifiers import parse_external_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alert", tags=["Alerts"])


def _parse_path_id(external_id: str) -> UUID:
    """Parse an external id taken from the URL path.

    :param external_id: Raw path segment.
    :returns: The parsed id.
    :raises HTTPException: 400 if the id is malformed.
    """
    try:
        return parse_external_id(external_id)
    except ExternalIDParseError as e:
        logger.warning("Invalid identifier format, returning 400")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="invalid identifier format",
        ) from e


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Translate store exceptions into HTTP errors.

    Store error details are logged, never returned to the client.

    :param action: Description of the operation, used in messages.
    :raises HTTPException: 404, 503 or 500.
    """
    try:
        yield
    except AlertNotFoundError as e:
        logger.warning(f"Alert not found while {action}, returning 404")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="alert not found",
        ) from e
    except OperationCancelledError as e:
        logger.warning(f"Deadline exceeded while {action}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"timed out while {action}",
        ) from e
    except StoreError as e:
        logger.exception(f"Error while {action}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"error occurred while {action}",
        ) from e


@router.post(
    "",
    response_model=AlertResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create alert",
)
def create_alert(
    request: CreateAlertRequest,
    store: AlertStore = Depends(get_alert_store),
    deadline: Deadline = Depends(get_request_deadline),
) -> AlertResponse:
    """Create a new alert."""
    start = time.perf_counter()
    logger.info("Create alert")

    with _store_errors("creating alert"):
        alert = store.create(request.message, deadline=deadline)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Create alert complete: id={alert.external_id}, elapsed={elapsed_ms:.0f}ms")

    return AlertResponse.from_alert(alert)


@router.get(
    "/{external_id}",
    response_model=AlertResponse,
    summary="Get alert",
)
def get_alert(
    external_id: str,
    store: AlertStore = Depends(get_alert_store),
    deadline: Deadline = Depends(get_request_deadline),
) -> AlertResponse:
    """Get a specific alert by its external ID."""
    alert_id = _parse_path_id(external_id)
    start = time.perf_counter()
    logger.info(f"Get alert: id={alert_id}")

    with _store_errors("getting alert"):
        alert = store.get_by_external_id(alert_id, deadline=deadline)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Get alert complete: id={alert_id}, elapsed={elapsed_ms:.0f}ms")

    return AlertResponse.from_alert(alert)


@router.put(
    "/{external_id}",
    response_model=AlertResponse,
    summary="Update alert",
)
def update_alert(
    external_id: str,
    request: UpdateAlertRequest,
    store: AlertStore = Depends(get_alert_store),
    deadline: Deadline = Depends(get_request_deadline),
) -> AlertResponse:
    """Replace the message of an existing alert."""
    alert_id = _parse_path_id(external_id)
    start = time.perf_counter()
    logger.info(f"Update alert: id={alert_id}")

    with _store_errors("updating alert"):
        alert = store.update_by_external_id(alert_id, request.message, deadline=deadline)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Update alert complete: id={alert_id}, elapsed={elapsed_ms:.0f}ms")

    return AlertResponse.from_alert(alert)


@router.delete(
    "/{external_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete alert",
)
def delete_alert(
    external_id: str,
    store: AlertStore = Depends(get_alert_store),
    deadline: Deadline = Depends(get_request_deadline),
) -> None:
    """Permanently delete an alert.

    Responds 204 with an empty body rather than echoing the deleted alert.
    Deleting an alert that has already been deleted returns 404.
    """
    alert_id = _parse_path_id(external_id)
    start = time.perf_counter()
    logger.info(f"Delete alert: id={alert_id}")

    with _store_errors("deleting alert"):
        store.delete_by_external_id(alert_id, deadline=deadline)

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Delete alert complete: id={alert_id}, elapsed={elapsed_ms:.0f}ms")
