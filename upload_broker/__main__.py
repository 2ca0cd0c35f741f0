"""
Run the API server.

Usage:
    python -m upload_broker
"""

import logging

import uvicorn

from upload_broker.api.main import create_app
from upload_broker.config.logging_config import configure_logging
from upload_broker.config.settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = create_app(settings)
    logger.info(f"Server starting on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
