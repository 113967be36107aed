# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Datetime utilities.

All timestamps are timezone-aware UTC.
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get the current UTC datetime.

    Returns:
        Timezone-aware datetime in UTC.
    """
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Get the current UTC date."""
    return utc_now().date()

