# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package.

Example:
    >>> from intervention_tracker.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.db.url)
"""

from intervention_tracker.core.config.settings import (
    APISettings,
    AuthSettings,
    CORSSettings,
    DatabaseSettings,
    RateLimitSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "DatabaseSettings",
    "AuthSettings",
    "RateLimitSettings",
    "CORSSettings",
    "APISettings",
]
