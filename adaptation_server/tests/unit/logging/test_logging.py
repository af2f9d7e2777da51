"""
Tests for the structlog configuration and processors.
"""

import logging
import logging.handlers

import pytest
import structlog

from adaptation_server.structured_logging import enhanced_logging_config
from adaptation_server.structured_logging.enhanced_logging_config import (
    bind_request_context,
    clear_request_context,
    setup_enhanced_logging,
)
from adaptation_server.structured_logging.logging_processors import sanitize_sensitive_data


class TestSanitizeSensitiveData:
    """Tests for the redaction processor."""

    @pytest.mark.parametrize("key", ["password", "token", "read_write_token", "secret", "api_key", "Authorization"])
    def test_sensitive_keys_are_redacted(self, key: str) -> None:
        """Test that credential-like keys are replaced."""
        result = sanitize_sensitive_data(None, "info", {"event": "x", key: "hunter2"})

        assert result[key] == "[REDACTED]"
        assert result["event"] == "x"

    def test_nested_dicts_are_sanitized(self) -> None:
        """Test that nested configuration dumps are redacted."""
        result = sanitize_sensitive_data(None, "info", {"config": {"blob_store": {"read_write_token": "t"}}})

        assert result["config"]["blob_store"]["read_write_token"] == "[REDACTED]"

    @pytest.mark.parametrize("key", ["image_key", "creature_id", "survival_chance", "tokens_used"])
    def test_ordinary_keys_are_kept(self, key: str) -> None:
        """Test that safe and unrelated keys are untouched."""
        result = sanitize_sensitive_data(None, "info", {key: "value"})

        assert result[key] == "value"


class TestSetupEnhancedLogging:
    """Tests for logging initialization."""

    @pytest.fixture(autouse=True)
    def restore_logging_state(self):
        state = enhanced_logging_config._logging_state
        saved = (state.initialized, state.signature)
        root_handlers = list(logging.getLogger().handlers)
        root_level = logging.getLogger().level
        yield
        state.initialized, state.signature = saved
        root_logger = logging.getLogger()
        root_logger.handlers = root_handlers
        root_logger.setLevel(root_level)
        structlog.reset_defaults()

    def test_setup_is_idempotent(self) -> None:
        """Test that a second call does not stack handlers."""
        enhanced_logging_config._logging_state.initialized = False
        config = {"logging": {"level": "WARNING", "format": "json"}}

        setup_enhanced_logging(config)
        handler_count = len(logging.getLogger().handlers)
        setup_enhanced_logging(config)

        assert len(logging.getLogger().handlers) == handler_count
        assert logging.getLogger().level == logging.WARNING

    def test_invalid_level_falls_back_to_info(self) -> None:
        """Test that an unknown level does not break startup."""
        setup_enhanced_logging({"logging": {"level": "verbose"}}, force_reconfigure=True)

        assert logging.getLogger().level == logging.INFO

    def test_disable_logging_only_emits_critical(self) -> None:
        """Test the disable flag."""
        setup_enhanced_logging({"logging": {"disable_logging": True}}, force_reconfigure=True)

        assert logging.getLogger().level == logging.CRITICAL

    def test_log_file_gets_rotating_handler(self, tmp_path) -> None:
        """Test that a configured log file adds a file handler."""
        log_file = tmp_path / "logs" / "server.log"

        setup_enhanced_logging({"logging": {"level": "INFO", "log_file": str(log_file)}}, force_reconfigure=True)

        assert log_file.parent.exists()
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logging.getLogger().handlers)


class TestRequestContext:
    """Tests for request-scoped log context."""

    def test_bind_and_clear(self) -> None:
        """Test that bound values are visible until cleared."""
        bind_request_context(request_id="req-1", method="GET", path=None)

        assert structlog.contextvars.get_contextvars() == {"request_id": "req-1", "method": "GET"}

        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}
