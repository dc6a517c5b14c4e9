"""
db/models/harvest.py

Harvest aggregate: one crop picked on one date by one or more employees.
Each detail line records what one employee harvested and what they earn.
"""

import uuid
import datetime

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, DetailOwnerMixin, LockableMixin, SoftDeleteMixin, TimestampMixin


class Harvest(Base, TimestampMixin, SoftDeleteMixin, DetailOwnerMixin):
    """
    amount is the canonical sum of the detail amounts (grams, or milliliters
    for a volume crop) and value_pay the sum of the detail payments; both
    are checked before persistence.
    """

    __tablename__ = "harvests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    crop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("crops.id", ondelete="RESTRICT"),
        nullable=False,
    )

    amount: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Total harvested quantity in the crop family canonical unit",
    )

    value_pay: Mapped[int] = mapped_column(Integer, nullable=False)

    observation: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ── Relationships ──────────────────────────────────────────────────────────

    details: Mapped[list["HarvestDetail"]] = relationship(
        "HarvestDetail",
        back_populates="harvest",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (
        Index("ix_harvests_crop_id", "crop_id"),
        Index("ix_harvests_date", "date"),
    )

    def __repr__(self) -> str:
        return f"<Harvest id={self.id} date={self.date} crop_id={self.crop_id}>"


class HarvestDetail(Base, TimestampMixin, SoftDeleteMixin, LockableMixin):
    __tablename__ = "harvest_details"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    harvest_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("harvests.id", ondelete="CASCADE"),
        nullable=False,
    )

    employee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("employees.id", ondelete="RESTRICT"),
        nullable=False,
    )

    amount: Mapped[float] = mapped_column(Float, nullable=False)

    unit_of_measure: Mapped[str] = mapped_column(String(20), nullable=False)

    value_pay: Mapped[int] = mapped_column(Integer, nullable=False)

    harvest: Mapped["Harvest"] = relationship("Harvest", back_populates="details")

    __table_args__ = (
        Index("ix_harvest_details_harvest_id", "harvest_id"),
        Index("ix_harvest_details_employee_id", "employee_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<HarvestDetail id={self.id} employee_id={self.employee_id} "
            f"amount={self.amount} {self.unit_of_measure}>"
        )


class HarvestProcessed(Base, TimestampMixin, SoftDeleteMixin):
    """
    Part of a harvest moved out of the crop's unprocessed stock.

    crop_id is copied from the harvest on create and never changes, so the
    stock row a record drew from stays known after the harvest is edited.
    """

    __tablename__ = "harvests_processed"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    harvest_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("harvests.id", ondelete="RESTRICT"),
        nullable=False,
    )

    crop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("crops.id", ondelete="RESTRICT"),
        nullable=False,
    )

    amount: Mapped[float] = mapped_column(Float, nullable=False)

    unit_of_measure: Mapped[str] = mapped_column(String(20), nullable=False)

    __table_args__ = (
        Index("ix_harvests_processed_harvest_id", "harvest_id"),
        Index("ix_harvests_processed_crop_id", "crop_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<HarvestProcessed id={self.id} harvest_id={self.harvest_id} "
            f"amount={self.amount} {self.unit_of_measure}>"
        )
