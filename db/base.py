"""
db/base.py

Declarative base and shared mixins for all SQLAlchemy models.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    Project-wide declarative base.
    All models must inherit from this class.
    """

    type_annotation_map: dict[type, Any] = {}


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at to any model.
    updated_at is automatically refreshed on every UPDATE via onupdate.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=utcnow,
    )


class SoftDeleteMixin:
    """
    Mixin for records that are hidden rather than physically deleted.
    A row with deleted_at set is treated as absent by every read path.
    """

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self, when: datetime | None = None) -> None:
        self.deleted_at = when or utcnow()


class LockableMixin:
    """
    Mixin for detail lines that downstream records can pin.

    locked_by holds a reference such as ``payment:<uuid>``. A locked line
    cannot be deleted and its stock-relevant fields cannot change.
    """

    locked_by: Mapped[str | None] = mapped_column(
        String(120),
        nullable=True,
        default=None,
        comment="Reference of the downstream record pinning this line",
    )

    @property
    def is_locked(self) -> bool:
        return self.locked_by is not None


class DetailOwnerMixin:
    """
    Mixin for aggregates that own a ``details`` relationship of soft-deletable
    lines. live_details hides lines removed by earlier updates.
    """

    @property
    def live_details(self) -> list[Any]:
        return [line for line in self.details if line.deleted_at is None]
