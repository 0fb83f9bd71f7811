"""Run Alembic schema migrations from inside the application."""

import logging

from alembic import command
from alembic.config import Config

from alert_service.config import DatabaseConfig
from alert_service.paths import PROJECT_ROOT

logger = logging.getLogger(__name__)

ALEMBIC_INI = PROJECT_ROOT / "alembic.ini"


def build_alembic_config(db_config: DatabaseConfig) -> Config:
    """Build an Alembic config that connects with the migration credentials.

    The URL is passed through ``Config.attributes`` rather than the ini file
    so passwords containing ``%`` survive configparser interpolation.

    :param db_config: Database settings.
    :returns: The Alembic config.
    """
    alembic_config = Config(str(ALEMBIC_INI))
    alembic_config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    alembic_config.attributes["sqlalchemy_url"] = db_config.migration_url().render_as_string(
        hide_password=False
    )
    # Logging is already configured by the application.
    alembic_config.attributes["configure_logger"] = False
    return alembic_config


def run_migrations(db_config: DatabaseConfig, revision: str = "head") -> None:
    """Upgrade the database schema.

    :param db_config: Database settings.
    :param revision: Target revision.
    """
    logger.info(f"Performing database migration: target={revision}")
    command.upgrade(build_alembic_config(db_config), revision)
    logger.info("Database migration complete")
