"""
ASGI entrypoint:

    uvicorn upload_broker.api.asgi:app --port 8080
"""

from upload_broker.api.main import create_app
from upload_broker.config.logging_config import configure_logging
from upload_broker.config.settings import get_settings

settings = get_settings()
configure_logging(settings.log_level)

app = create_app(settings)
