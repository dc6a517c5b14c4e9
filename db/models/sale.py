"""
db/models/sale.py

Sale aggregate: crops sold to clients. Every line draws on the stock of
the crop it sells.
"""

import uuid
import datetime

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, DetailOwnerMixin, LockableMixin, SoftDeleteMixin, TimestampMixin


class Sale(Base, TimestampMixin, SoftDeleteMixin, DetailOwnerMixin):
    __tablename__ = "sales"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    amount: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Total quantity sold in the canonical unit of its lines",
    )

    value_pay: Mapped[int] = mapped_column(Integer, nullable=False)

    # ── Relationships ──────────────────────────────────────────────────────────

    details: Mapped[list["SaleDetail"]] = relationship(
        "SaleDetail",
        back_populates="sale",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (Index("ix_sales_date", "date"),)

    def __repr__(self) -> str:
        return f"<Sale id={self.id} date={self.date} value_pay={self.value_pay}>"


class SaleDetail(Base, TimestampMixin, SoftDeleteMixin, LockableMixin):
    __tablename__ = "sale_details"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    sale_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sales.id", ondelete="CASCADE"),
        nullable=False,
    )

    crop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("crops.id", ondelete="RESTRICT"),
        nullable=False,
    )

    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
    )

    amount: Mapped[float] = mapped_column(Float, nullable=False)

    unit_of_measure: Mapped[str] = mapped_column(String(20), nullable=False)

    value_pay: Mapped[int] = mapped_column(Integer, nullable=False)

    sale: Mapped["Sale"] = relationship("Sale", back_populates="details")

    __table_args__ = (
        Index("ix_sale_details_sale_id", "sale_id"),
        Index("ix_sale_details_crop_id", "crop_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<SaleDetail id={self.id} crop_id={self.crop_id} "
            f"amount={self.amount} {self.unit_of_measure}>"
        )
