"""Unit tests for the logging utility."""

from __future__ import annotations

import json
import logging

from passport.core.logger import JSONFormatter, configure_logging


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    # Act
    configure_logging("DEBUG")

    # Assert
    assert logging.getLogger().level == logging.DEBUG
    configure_logging("WARNING")


def test_json_formatter_includes_extra_fields() -> None:
    """Structured ``extra=`` fields are rendered next to the message."""

    # Arrange
    record = logging.LogRecord(
        "passport.test", logging.INFO, __file__, 1, "join.succeeded", None, None
    )
    record.user_id = "u1"
    record.server_id = "srv-t"

    # Act
    payload = json.loads(JSONFormatter().format(record))

    # Assert
    assert payload["message"] == "join.succeeded"
    assert payload["level"] == "INFO"
    assert payload["user_id"] == "u1"
    assert payload["server_id"] == "srv-t"
    assert payload["request_id"] is None
