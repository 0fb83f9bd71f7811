"""HTTP Basic authentication for API endpoints."""

import logging
import secrets

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from alert_service.config import AlertServiceConfig, get_config

logger = logging.getLogger(__name__)

security = HTTPBasic()


def verify_basic_auth(
    credentials: HTTPBasicCredentials = Security(security),
    config: AlertServiceConfig = Depends(get_config),
) -> str:
    """Verify Basic credentials against the configured users.

    :param credentials: The HTTP Basic credentials.
    :param config: Application configuration.
    :returns: The authenticated username.
    :raises HTTPException: If the credentials are invalid.
    """
    expected_password = config.accounts.get(credentials.username)

    # Compare against a dummy value for unknown users to keep timing uniform.
    password_ok = secrets.compare_digest(
        credentials.password.encode(),
        (expected_password if expected_password is not None else secrets.token_hex(16)).encode(),
    )

    if expected_password is None or not password_ok:
        logger.warning("Invalid Basic credentials provided")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username
