# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User, role and tool models.

Access is granted through two many-to-many links:
users -> user_roles -> roles -> role_tools -> tools.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from intervention_tracker.infrastructure.database.models.base import (
    Base,
    CreatedAtMixin,
    IntegerIdMixin,
    SoftDeleteMixin,
    TimestampMixin,
)


class User(Base, IntegerIdMixin, TimestampMixin, SoftDeleteMixin):
    """Staff account linked to an identity-provider subject."""

    __tablename__ = "users"

    cognito_sub: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_sign_in_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    roles: Mapped[list["Role"]] = relationship(
        secondary="user_roles",
        order_by="Role.name",
        viewonly=True,
    )

    @property
    def full_name(self) -> str:
        """Display name, falling back to the email address."""
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or (self.email or "")

    @property
    def role_names(self) -> list[str]:
        """Names of the roles currently assigned."""
        return [role.name for role in self.roles]


class Role(Base, IntegerIdMixin, TimestampMixin):
    """Named role; system roles are managed by seed data."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class UserRole(Base, IntegerIdMixin, TimestampMixin):
    """Assignment of a role to a user."""

    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role_id"),)

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False
    )


class Tool(Base, IntegerIdMixin, TimestampMixin):
    """Feature module gated behind role-based access."""

    __tablename__ = "tools"

    identifier: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class RoleTool(Base, IntegerIdMixin, CreatedAtMixin):
    """Grant of a tool to a role."""

    __tablename__ = "role_tools"
    __table_args__ = (UniqueConstraint("role_id", "tool_id"),)

    role_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False
    )
    tool_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tools.id", ondelete="CASCADE"), nullable=False
    )
