"""Health check API."""

from alert_service.api.health.endpoints import router

__all__ = ["router"]
