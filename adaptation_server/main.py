"""
Adaptation Survival Server - main application entry point.

Exposes the ASGI application for `uvicorn adaptation_server.main:app`.
Logging is configured before the app is built so that startup messages
are captured.
"""

from .app.factory import create_app
from .config import get_config
from .structured_logging.enhanced_logging_config import get_logger, setup_enhanced_logging

config = get_config()
setup_enhanced_logging(config.to_legacy_dict())

logger = get_logger(__name__)
logger.info("Logging setup completed", environment=config.logging.environment)

app = create_app(config)
