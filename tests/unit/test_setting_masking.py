# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for secret setting masking."""

from datetime import datetime, timezone

from intervention_tracker.domains.setting.service import to_masked_response
from intervention_tracker.models.setting import SECRET_MASK


def setting_row(**overrides) -> dict:
    row = {
        "id": 1,
        "key": "GITHUB_ISSUE_TOKEN",
        "value": "ghp_secret",
        "description": "Token",
        "category": "external_services",
        "is_secret": True,
        "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2025, 1, 2, tzinfo=timezone.utc),
    }
    row.update(overrides)
    return row


class TestToMaskedResponse:
    """Tests for to_masked_response."""

    def test_secret_with_value_is_masked(self) -> None:
        response = to_masked_response(setting_row())

        assert response.value == SECRET_MASK
        assert response.has_value is True

    def test_secret_without_value_is_empty(self) -> None:
        response = to_masked_response(setting_row(value=""))

        assert response.value == ""
        assert response.has_value is False

    def test_plain_setting_is_returned_in_clear(self) -> None:
        response = to_masked_response(setting_row(key="app_name", value="Tracker", is_secret=False))

        assert response.value == "Tracker"
        assert response.is_secret is False
