# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for logging setup and log parameter sanitization."""

import json
import logging

import pytest

from intervention_tracker.core.config import Settings
from intervention_tracker.utils.logging import (
    MASK,
    bind_context,
    clear_context,
    sanitize_for_logging,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    clear_context()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_lines_carry_bound_context(self, capsys, restore_root_logger) -> None:
        setup_logging(Settings(_env_file=None, environment="staging", log_level="INFO"))
        bind_context(request_id="abc123", action="create_student")

        logging.getLogger("intervention_tracker.tests").info("Student created: %s", 7)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "Student created: 7"
        assert record["request_id"] == "abc123"
        assert record["action"] == "create_student"
        assert record["level"] == "info"
        assert record["logger"] == "intervention_tracker.tests"

    def test_level_filters_records(self, capsys, restore_root_logger) -> None:
        setup_logging(Settings(_env_file=None, environment="staging", log_level="WARNING"))

        logging.getLogger("intervention_tracker.tests").info("hidden")

        assert "hidden" not in capsys.readouterr().out


class TestSanitizeForLogging:
    """Tests for sanitize_for_logging."""

    def test_masks_sensitive_keys(self) -> None:
        result = sanitize_for_logging(
            {"email": "a@b.c", "password": "pw", "access_token": "t", "api_key": "k"}
        )

        assert result == {
            "email": "a@b.c",
            "password": MASK,
            "access_token": MASK,
            "api_key": MASK,
        }

    def test_masks_value_of_secret_rows(self) -> None:
        """Test that a secret setting's value is hidden."""
        result = sanitize_for_logging({"key": "S3_KEY", "value": "abc", "is_secret": True})

        assert result["value"] == MASK
        assert result["key"] == "S3_KEY"

    def test_keeps_value_of_plain_rows(self) -> None:
        result = sanitize_for_logging({"key": "app_name", "value": "Tracker", "is_secret": False})

        assert result["value"] == "Tracker"

    def test_nested_structures(self) -> None:
        result = sanitize_for_logging(
            {"args": [{"secret": "x"}, 3], "kwargs": {"data": {"Authorization": "Bearer y"}}}
        )

        assert result["args"] == [{"secret": MASK}, 3]
        assert result["kwargs"]["data"]["Authorization"] == MASK

    def test_scalars_pass_through(self) -> None:
        assert sanitize_for_logging(5) == 5
        assert sanitize_for_logging(None) is None
