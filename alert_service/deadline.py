"""Caller-supplied deadlines and cancellation for store operations."""

import threading
import time
from dataclasses import dataclass, field

from alert_service.exceptions import OperationCancelledError


@dataclass(frozen=True)
class Deadline:
    """A point in monotonic time after which an operation must give up.

    A deadline can also be cancelled explicitly, from any thread, by whoever
    owns the operation.

    :param expires_at: ``time.monotonic()`` value at expiry, or None for no limit.
    """

    expires_at: float | None = None
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False, compare=False)

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        """Create a deadline that expires ``seconds`` from now.

        :param seconds: Time budget in seconds.
        :returns: The deadline.
        """
        return cls(expires_at=time.monotonic() + seconds)

    @classmethod
    def never(cls) -> "Deadline":
        """Create a deadline with no time limit (it can still be cancelled)."""
        return cls(expires_at=None)

    def cancel(self) -> None:
        """Signal cancellation to any operation holding this deadline."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds left before expiry.

        :returns: Remaining seconds (never negative), or None for no limit.
        """
        if self.expires_at is None:
            return None
        return max(self.expires_at - time.monotonic(), 0.0)

    @property
    def expired(self) -> bool:
        """Whether the deadline has passed or been cancelled."""
        if self.cancelled:
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        """Raise if the deadline has passed or been cancelled.

        :raises OperationCancelledError: If the operation must stop.
        """
        if self.cancelled:
            raise OperationCancelledError("Operation cancelled by caller")
        if self.expired:
            raise OperationCancelledError("Operation deadline exceeded")
