"""
db/models/consumption.py

Supplies consumption aggregate. Each line records a supply applied to a
crop and draws on that supply's inventory.
"""

import uuid
import datetime

from sqlalchemy import Date, Float, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, DetailOwnerMixin, LockableMixin, SoftDeleteMixin, TimestampMixin


class SuppliesConsumption(Base, TimestampMixin, SoftDeleteMixin, DetailOwnerMixin):
    __tablename__ = "supplies_consumptions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    observation: Mapped[str | None] = mapped_column(Text, nullable=True)

    details: Mapped[list["SuppliesConsumptionDetail"]] = relationship(
        "SuppliesConsumptionDetail",
        back_populates="consumption",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (Index("ix_supplies_consumptions_date", "date"),)

    def __repr__(self) -> str:
        return f"<SuppliesConsumption id={self.id} date={self.date}>"


class SuppliesConsumptionDetail(Base, TimestampMixin, SoftDeleteMixin, LockableMixin):
    __tablename__ = "supplies_consumption_details"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    consumption_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("supplies_consumptions.id", ondelete="CASCADE"),
        nullable=False,
    )

    supply_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("supplies.id", ondelete="RESTRICT"),
        nullable=False,
    )

    crop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("crops.id", ondelete="RESTRICT"),
        nullable=False,
        comment="Crop the supply was applied to",
    )

    amount: Mapped[float] = mapped_column(Float, nullable=False)

    unit_of_measure: Mapped[str] = mapped_column(String(20), nullable=False)

    consumption: Mapped["SuppliesConsumption"] = relationship(
        "SuppliesConsumption",
        back_populates="details",
    )

    __table_args__ = (
        Index("ix_supplies_consumption_details_consumption_id", "consumption_id"),
        Index("ix_supplies_consumption_details_supply_id", "supply_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<SuppliesConsumptionDetail id={self.id} supply_id={self.supply_id} "
            f"amount={self.amount} {self.unit_of_measure}>"
        )
