# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Intervention Tracker - K-12 student intervention tracking backend."""

__version__ = "0.1.0"
