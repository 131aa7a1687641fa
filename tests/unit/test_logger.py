"""
Unit tests for logger module.
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
import structlog

from careerpath.utils.logger import configure_logging, get_logger, mask_credentials


class TestMaskCredentials:
    """Test cases for mask_credentials processor."""

    @pytest.mark.parametrize(
        "key",
        ["api_key", "gemini_api_key", "password", "access_token", "secret", "auth_header"],
    )
    def test_masks_sensitive_fields(self, key):
        # Arrange
        event_dict = {"event": "Gemini call", key: "AIza-very-secret"}

        # Act
        result = mask_credentials(MagicMock(), "info", event_dict)

        # Assert
        assert result[key] == "***MASKED***"
        assert result["event"] == "Gemini call"

    def test_does_not_mask_non_sensitive_fields(self):
        """Test that lookalike names are left alone."""
        # Arrange
        event_dict = {
            "event": "Career analysis received",
            "author": "Jane",
            "tokens_used": 1200,
            "skill_gap_count": 6,
        }

        # Act
        result = mask_credentials(MagicMock(), "info", event_dict)

        # Assert
        assert result["author"] == "Jane"
        assert result["tokens_used"] == 1200
        assert result["skill_gap_count"] == 6


class TestConfigureLogging:
    """Test cases for configure_logging function."""

    @patch("careerpath.utils.logger.structlog")
    def test_creates_log_directory(self, mock_structlog, tmp_path):
        """Test that configure_logging creates missing parent directories."""
        # Arrange
        log_file = tmp_path / "nested" / "logs" / "careerpath.log"

        # Act
        configure_logging(log_file=str(log_file))

        # Assert
        assert log_file.parent.is_dir()
        mock_structlog.configure.assert_called_once()

    @patch("careerpath.utils.logger.structlog")
    def test_masking_processor_in_chain(self, mock_structlog, tmp_path):
        # Act
        configure_logging(log_file=str(tmp_path / "app.log"))

        # Assert
        processors = mock_structlog.configure.call_args.kwargs["processors"]
        assert mask_credentials in processors

    def test_writes_json_lines_to_file(self, tmp_path):
        """Test that records land in the log file as JSON with bound context."""
        # Arrange
        log_file = tmp_path / "app.log"
        configure_logging(log_file=str(log_file), log_level="debug")
        logger = get_logger(correlation_id="abc", phase="chat", component="consultant_chat")

        try:
            # Act
            logger.info("Chat reset", api_key="AIza-secret")
            for handler in logging.getLogger().handlers:
                handler.flush()

            # Assert
            record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
            assert record["event"] == "Chat reset"
            assert record["correlation_id"] == "abc"
            assert record["phase"] == "chat"
            assert record["component"] == "consultant_chat"
            assert record["api_key"] == "***MASKED***"
            assert record["level"] == "info"
        finally:
            structlog.reset_defaults()
            for handler in logging.getLogger().handlers[:]:
                handler.close()
                logging.getLogger().removeHandler(handler)


class TestGetLogger:
    """Test cases for get_logger function."""

    def test_binds_context(self):
        # Act
        with structlog.testing.capture_logs() as logs:
            get_logger(correlation_id="id-1", phase="analysis", component="gateway").info(
                "hello"
            )

        # Assert
        assert logs[0]["correlation_id"] == "id-1"
        assert logs[0]["phase"] == "analysis"
        assert logs[0]["component"] == "gateway"

    def test_generates_correlation_id_if_not_provided(self):
        with structlog.testing.capture_logs() as logs:
            get_logger().info("hello")

        assert len(logs[0]["correlation_id"]) == 36

    def test_omits_unset_context(self):
        with structlog.testing.capture_logs() as logs:
            get_logger(correlation_id="id-1").info("hello")

        assert "phase" not in logs[0]
        assert "component" not in logs[0]
