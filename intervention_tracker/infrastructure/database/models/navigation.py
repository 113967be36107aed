# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Navigation menu item model."""

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from intervention_tracker.infrastructure.database.models.base import (
    Base,
    CreatedAtMixin,
    IntegerIdMixin,
)


class NavigationItem(Base, IntegerIdMixin, CreatedAtMixin):
    """Sidebar entry, optionally gated by a tool or role."""

    __tablename__ = "navigation_items"

    label: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("navigation_items.id", ondelete="SET NULL"), nullable=True
    )
    tool_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tools.id", ondelete="SET NULL"), nullable=True
    )
    tool_identifier: Mapped[str | None] = mapped_column(String(100), nullable=True)
    requires_role: Mapped[str | None] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="page")
