"""SQLAlchemy ORM models for alerts."""

import uuid as uuid_module
from datetime import datetime

from sqlalchemy import DateTime, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from alert_service.database.core import Base

# Maximum length of message to show in repr
REPR_MESSAGE_MAX_LENGTH = 50


class Alert(Base):
    """ORM model for an alert.

    ``internal_id`` is the sequential storage key and never leaves the
    persistence layer. ``external_id`` is the random identifier exposed to
    API callers.
    """

    __tablename__ = "alert"
    __table_args__ = (UniqueConstraint("external_id", name="alert_external_id_key"),)

    internal_id: Mapped[int] = mapped_column(
        "id",
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    external_id: Mapped[uuid_module.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    message: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation of the alert."""
        if len(self.message) > REPR_MESSAGE_MAX_LENGTH:
            message_preview = self.message[:REPR_MESSAGE_MAX_LENGTH] + "..."
        else:
            message_preview = self.message
        return f"<Alert(external_id={self.external_id}, message={message_preview!r})>"
