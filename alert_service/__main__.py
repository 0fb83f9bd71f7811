"""Entry point for running the API server as a module.

Allows running with: python -m alert_service
"""

import uvicorn

from alert_service.config import get_config


def main() -> None:
    """Serve the API with uvicorn on the configured port.

    Uvicorn handles SIGINT/SIGTERM and lets in-flight requests finish.
    """
    config = get_config()
    uvicorn.run(
        "alert_service.api.app:app",
        host="0.0.0.0",  # noqa: S104
        port=config.port,
        log_config=None,
        timeout_graceful_shutdown=5,
    )


if __name__ == "__main__":
    main()
