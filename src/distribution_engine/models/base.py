"""Declarative base and shared column mixins."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import ColumnElement, Date, DateTime, Uuid, and_, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    type_annotation_map = {
        UUID: Uuid(as_uuid=True),
        datetime: DateTime(timezone=True),
        date: Date,
    }


class TimestampMixin:
    """Mixin for models with created_at timestamp."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class PeriodMixin:
    """Inclusive ``[period_start, period_end]`` validity period."""

    period_start: Mapped[date] = mapped_column(nullable=False)
    period_end: Mapped[date] = mapped_column(nullable=False)

    @classmethod
    def overlapping(cls, start: date, end: date) -> ColumnElement[bool]:
        """SQL condition for rows whose period intersects [start, end]."""
        return and_(cls.period_start <= end, cls.period_end >= start)
