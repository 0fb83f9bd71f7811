"""Pydantic models for alert API endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from alert_service.database.alerts.models import Alert


class CreateAlertRequest(BaseModel):
    """Request model for creating an alert."""

    message: str = Field(..., min_length=1, description="Alert message")


class UpdateAlertRequest(BaseModel):
    """Request model for replacing an alert's message."""

    message: str = Field(..., min_length=1, description="New alert message")


class AlertResponse(BaseModel):
    """Response model for an alert.

    The internal storage key is deliberately absent.
    """

    external_id: UUID = Field(..., description="Alert identifier")
    created_at: datetime = Field(..., description="When the alert was created")
    updated_at: datetime = Field(..., description="When the alert was last updated")
    message: str = Field(..., description="Alert message")

    @classmethod
    def from_alert(cls, alert: Alert) -> "AlertResponse":
        """Convert an alert model to a response.

        :param alert: The database model.
        :returns: API response model.
        """
        return cls(
            external_id=alert.external_id,
            created_at=alert.created_at,
            updated_at=alert.updated_at,
            message=alert.message,
        )
