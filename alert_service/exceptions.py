"""Custom exceptions for the alert service."""

from uuid import UUID


class AlertServiceError(Exception):
    """Base exception for alert service errors."""


class ExternalIDParseError(AlertServiceError):
    """Raised when text is not a canonical external identifier."""

    def __init__(self, value: object) -> None:
        """Initialise ExternalIDParseError.

        :param value: The rejected input.
        """
        self.value = value
        super().__init__(f"Invalid external id: {value!r}")


class AlertNotFoundError(AlertServiceError):
    """Raised when no alert exists for the given external id."""

    def __init__(self, external_id: UUID) -> None:
        """Initialise AlertNotFoundError.

        :param external_id: The external id that matched no row.
        """
        self.external_id = external_id
        super().__init__(f"Alert for external id {external_id} not found")


class StoreError(AlertServiceError):
    """Raised for any database failure other than a missing alert.

    The originating SQLAlchemy exception, where there is one, is chained
    as ``__cause__``.
    """


class OperationCancelledError(StoreError):
    """Raised when a caller's deadline expires or it cancels an operation."""
