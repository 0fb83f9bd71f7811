"""Configuration for the alert service using pydantic-settings."""

from functools import lru_cache

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from alert_service.paths import PROJECT_ROOT

_ENV_FILE = PROJECT_ROOT / ".env"

DRIVER_NAME = "postgresql+psycopg2"


class DatabaseConfig(BaseModel):
    """PostgreSQL connection settings.

    Migrations run with their own credentials so the application role can be
    denied DDL privileges. When unset, the application credentials are used.
    """

    username: str = Field(default="alert_service", description="Application role")
    password: SecretStr = Field(default=SecretStr(""), description="Application role password")
    migration_username: str | None = Field(default=None, description="Role used for migrations")
    migration_password: SecretStr | None = Field(
        default=None,
        description="Password for the migration role",
    )
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, ge=1, le=65535, description="Database port")
    database: str = Field(default="alert_service", description="Database name")
    ssl_mode: str = Field(default="disable", description="libpq sslmode")
    pool_size: int = Field(default=5, ge=1, le=100, description="Persistent pooled connections")
    max_overflow: int = Field(default=5, ge=0, le=100, description="Extra connections under load")
    pool_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for a pooled connection",
    )
    connect_timeout: int = Field(
        default=3,
        ge=1,
        le=60,
        description="Seconds libpq waits to open a new connection",
    )
    echo: bool = Field(default=False, description="Log all SQL statements")

    def url(self) -> URL:
        """Build the application connection URL.

        :returns: The SQLAlchemy URL.
        """
        return self._build_url(self.username, self.password)

    def migration_url(self) -> URL:
        """Build the connection URL used for schema migrations.

        :returns: The SQLAlchemy URL.
        """
        return self._build_url(
            self.migration_username or self.username,
            self.migration_password or self.password,
        )

    def _build_url(self, username: str, password: SecretStr) -> URL:
        return URL.create(
            DRIVER_NAME,
            username=username,
            password=password.get_secret_value() or None,
            host=self.host,
            port=self.port,
            database=self.database,
            query={"sslmode": self.ssl_mode},
        )


class BasicUser(BaseModel):
    """A username/password pair accepted by HTTP Basic authentication."""

    username: str = Field(..., min_length=1)
    password: SecretStr


class AlertServiceConfig(BaseSettings):
    """Configuration for the alert service.

    All settings are loaded from environment variables with the ALERT_SERVICE_
    prefix. Nested database settings use a double underscore, e.g.
    ``ALERT_SERVICE_DB__HOST``. Users are supplied as a JSON list, e.g.
    ``ALERT_SERVICE_USERS='[{"username": "ops", "password": "secret"}]'``.

    :param environment: Deployment environment name (dev, test, prod).
    :param port: Port the HTTP server listens on.
    :param log_level: Root log level.
    :param cors_origins: Origins allowed by CORS.
    :param request_timeout_seconds: Deadline applied to each store call made by a request.
    :param auto_migrate: Run database migrations on application startup.
    :param db: Database connection settings.
    :param users: Accounts accepted by HTTP Basic authentication.
    """

    model_config = SettingsConfigDict(
        env_prefix="ALERT_SERVICE_",
        env_nested_delimiter="__",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field(default="dev", description="Deployment environment")
    port: int = Field(default=8080, ge=1, le=65535, description="HTTP listen port")
    log_level: str = Field(default="INFO", description="Root log level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200"],
        description="Origins allowed by CORS",
    )
    request_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=300,
        description="Per-request store deadline in seconds",
    )
    auto_migrate: bool = Field(default=False, description="Run migrations on startup")
    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
    users: list[BasicUser] = Field(default_factory=list)

    @property
    def accounts(self) -> dict[str, str]:
        """Get the configured Basic auth accounts.

        :returns: Mapping of username to plaintext password.
        """
        return {user.username: user.password.get_secret_value() for user in self.users}


@lru_cache
def get_config() -> AlertServiceConfig:
    """Get cached alert service settings.

    Settings are loaded once and cached for the lifetime of the process.

    :returns: Configured AlertServiceConfig instance.
    """
    return AlertServiceConfig()
