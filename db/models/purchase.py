"""
db/models/purchase.py

Supplies purchase aggregate. Each line buys one supply from one supplier
and adds to that supply's inventory.
"""

import uuid
import datetime

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, DetailOwnerMixin, LockableMixin, SoftDeleteMixin, TimestampMixin


class SuppliesPurchase(Base, TimestampMixin, SoftDeleteMixin, DetailOwnerMixin):
    __tablename__ = "supplies_purchases"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    value_pay: Mapped[int] = mapped_column(Integer, nullable=False)

    details: Mapped[list["SuppliesPurchaseDetail"]] = relationship(
        "SuppliesPurchaseDetail",
        back_populates="purchase",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (Index("ix_supplies_purchases_date", "date"),)

    def __repr__(self) -> str:
        return f"<SuppliesPurchase id={self.id} date={self.date} value_pay={self.value_pay}>"


class SuppliesPurchaseDetail(Base, TimestampMixin, SoftDeleteMixin, LockableMixin):
    __tablename__ = "supplies_purchase_details"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    purchase_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("supplies_purchases.id", ondelete="CASCADE"),
        nullable=False,
    )

    supply_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("supplies.id", ondelete="RESTRICT"),
        nullable=False,
    )

    supplier_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("suppliers.id", ondelete="RESTRICT"),
        nullable=False,
    )

    amount: Mapped[float] = mapped_column(Float, nullable=False)

    unit_of_measure: Mapped[str] = mapped_column(String(20), nullable=False)

    value_pay: Mapped[int] = mapped_column(Integer, nullable=False)

    purchase: Mapped["SuppliesPurchase"] = relationship(
        "SuppliesPurchase",
        back_populates="details",
    )

    __table_args__ = (
        Index("ix_supplies_purchase_details_purchase_id", "purchase_id"),
        Index("ix_supplies_purchase_details_supply_id", "supply_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<SuppliesPurchaseDetail id={self.id} supply_id={self.supply_id} "
            f"amount={self.amount} {self.unit_of_measure}>"
        )
