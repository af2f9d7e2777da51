"""
Configuration access for the Adaptation Survival server.

    from adaptation_server.config import get_config

    config = get_config()
    max_bytes = config.blob_store.max_upload_bytes

Outside tests the configuration is read once per process. Under pytest
every call re-reads the environment so tests can adjust it with
monkeypatch or patch.dict.
"""

import sys
import threading
from os import getenv

from pydantic import ValidationError as SettingsValidationError

from ..exceptions import ConfigurationError
from ..utils.error_logging import create_error_context, log_and_raise
from .models import AppConfig

__all__ = ["AppConfig", "get_config", "reset_config"]

_config_instance: AppConfig | None = None
_config_lock = threading.Lock()


def _running_under_pytest() -> bool:
    return "pytest" in sys.modules or bool(getenv("PYTEST_CURRENT_TEST"))


def get_config() -> AppConfig:
    """
    Return the application configuration.

    Raises:
        ConfigurationError: If a setting is invalid or DATABASE_URL is missing
    """
    global _config_instance  # pylint: disable=global-statement  # Reason: process-wide configuration cache
    if _running_under_pytest():
        return _load_config()
    with _config_lock:
        if _config_instance is None:
            _config_instance = _load_config()
        return _config_instance


def _load_config() -> AppConfig:
    try:
        return AppConfig()
    except SettingsValidationError as e:
        errors = e.errors()
        config_key = ".".join(str(part) for part in errors[0]["loc"]) if errors else None
        context = create_error_context()
        context.metadata["operation"] = "load_config"
        log_and_raise(
            ConfigurationError,
            f"Invalid configuration: {e}",
            context=context,
            details={"errors": [error["msg"] for error in errors]},
            user_friendly="Server configuration is invalid",
            config_key=config_key,
        )


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config_instance  # pylint: disable=global-statement  # Reason: process-wide configuration cache
    with _config_lock:
        _config_instance = None
