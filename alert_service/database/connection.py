"""Database engine and session factory management."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from alert_service.config import DatabaseConfig, get_config

logger = logging.getLogger(__name__)

# Upper bound on the pool checkout wait for the current call, if any
_checkout_timeout: ContextVar[float | None] = ContextVar("checkout_timeout", default=None)


class DeadlineQueuePool(QueuePool):
    """QueuePool whose checkout wait never outlives the caller's deadline.

    QueuePool reads ``_timeout`` on every checkout. Here it resolves to the
    smaller of the configured ``pool_timeout`` and the cap set by
    ``checkout_timeout()`` for the current thread or task.
    """

    @property
    def _timeout(self) -> float:
        cap = _checkout_timeout.get()
        if cap is None:
            return self._configured_timeout
        return min(self._configured_timeout, cap)

    @_timeout.setter
    def _timeout(self, value: float) -> None:
        self._configured_timeout = value

    @property
    def configured_timeout(self) -> float:
        """The checkout wait configured for the pool, ignoring any cap."""
        return self._configured_timeout


@contextmanager
def checkout_timeout(seconds: float | None) -> Iterator[None]:
    """Cap how long connections checked out in this block may wait for the pool.

    :param seconds: Maximum wait in seconds, or None for the pool default.
    """
    token = _checkout_timeout.set(seconds)
    try:
        yield
    finally:
        _checkout_timeout.reset(token)


def get_database_url(*, migration: bool = False) -> str:
    """Build the PostgreSQL database URL from configuration.

    :param migration: If True, use the migration credentials.
    :returns: The database connection URL, password included.
    """
    db = get_config().db
    url = db.migration_url() if migration else db.url()
    return url.render_as_string(hide_password=False)


def create_db_engine(db_config: DatabaseConfig | None = None) -> Engine:
    """Create a SQLAlchemy engine with a bounded connection pool.

    :param db_config: Database settings. Defaults to the application config.
    :returns: A configured SQLAlchemy engine.
    """
    if db_config is None:
        db_config = get_config().db

    engine = create_engine(
        db_config.url(),
        echo=db_config.echo,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
        poolclass=DeadlineQueuePool,
        connect_args={"connect_timeout": db_config.connect_timeout},
    )
    logger.info(
        f"Database engine created: host={db_config.host}, database={db_config.database}, "
        f"pool_size={db_config.pool_size}, max_overflow={db_config.max_overflow}"
    )
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to an engine.

    Loaded objects stay readable after commit so stores can return them once
    the session is closed.

    :param engine: The engine to bind.
    :returns: The session factory.
    """
    return sessionmaker(bind=engine, expire_on_commit=False)


@dataclass
class _DatabaseState:
    """Container for database connection state."""

    engine: Engine | None = field(default=None)
    session_factory: sessionmaker[Session] | None = field(default=None)


_state = _DatabaseState()


def get_engine() -> Engine:
    """Get or create the database engine singleton.

    :returns: The database engine.
    """
    if _state.engine is None:
        _state.engine = create_db_engine()
    return _state.engine


def get_session_factory() -> sessionmaker[Session]:
    """Get or create the session factory singleton.

    :returns: A sessionmaker bound to the database engine.
    """
    if _state.session_factory is None:
        _state.session_factory = create_session_factory(get_engine())
    return _state.session_factory


def dispose_engine() -> None:
    """Close all pooled connections and forget the engine singleton."""
    if _state.engine is not None:
        _state.engine.dispose()
        logger.info("Database engine disposed")
    _state.engine = None
    _state.session_factory = None
