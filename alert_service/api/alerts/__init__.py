"""Alert resource API."""

from alert_service.api.alerts.endpoints import router

__all__ = ["router"]
