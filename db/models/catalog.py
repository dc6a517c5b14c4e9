"""
db/models/catalog.py

Stock-bearing catalog entities: crops, supplies and their ledger rows.

A crop's stock is its harvested-but-unprocessed quantity; a supply's stock
is its inventory. Both live in ``stock_resources`` whose primary key is the
id of the crop or supply it tracks.
"""

import uuid

from sqlalchemy import CheckConstraint, Float, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, SoftDeleteMixin, TimestampMixin


class StockKind:
    """Kinds of resource tracked by the stock ledger."""

    CROP = "crop"
    SUPPLY = "supply"


class Crop(Base, TimestampMixin, SoftDeleteMixin):
    """
    A cultivated crop. Harvest lines add to its stock, sale lines draw from it.
    """

    __tablename__ = "crops"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    unit_family: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="mass",
        comment="Physical dimension of the crop stock: mass | volume",
    )

    def __repr__(self) -> str:
        return f"<Crop id={self.id} name={self.name!r}>"


class Supply(Base, TimestampMixin, SoftDeleteMixin):
    """
    An agricultural input (fertiliser, pesticide, ...). Purchases add to its
    inventory, consumptions draw from it.
    """

    __tablename__ = "supplies"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
    )

    brand: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    unit_of_measure: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Unit the supply is handled in; its family fixes the inventory family",
    )

    def __repr__(self) -> str:
        return (
            f"<Supply id={self.id} name={self.name!r} "
            f"unit_of_measure={self.unit_of_measure!r}>"
        )


class StockResource(Base, TimestampMixin, SoftDeleteMixin):
    """
    Ledger row holding the quantity available for one crop or supply.

    quantity is always expressed in the canonical unit of unit_family
    (grams for mass, milliliters for volume) and is never negative.
    Only the stock ledger mutates it.
    """

    __tablename__ = "stock_resources"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        comment="Id of the crop or supply this row tracks",
    )

    kind: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="crop | supply",
    )

    unit_family: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="mass | volume",
    )

    quantity: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        comment="Available quantity in canonical units",
    )

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_stock_resources_quantity_non_negative"),
        Index("ix_stock_resources_kind", "kind"),
    )

    def __repr__(self) -> str:
        return (
            f"<StockResource id={self.id} kind={self.kind!r} "
            f"quantity={self.quantity} family={self.unit_family!r}>"
        )
