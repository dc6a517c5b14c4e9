"""create catalog, stock ledger and aggregate tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _lock_column() -> sa.Column:
    return sa.Column(
        "locked_by",
        sa.String(length=120),
        nullable=True,
        comment="Reference of the downstream record pinning this line",
    )


def upgrade() -> None:
    # --- Catalog ---------------------------------------------------------
    op.create_table(
        "crops",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("unit_family", sa.String(length=16), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "supplies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("brand", sa.String(length=100), nullable=True),
        sa.Column("unit_of_measure", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "stock_resources",
        sa.Column("id", sa.Uuid(), nullable=False, comment="Id of the crop or supply this row tracks"),
        sa.Column("kind", sa.String(length=16), nullable=False),
        sa.Column("unit_family", sa.String(length=16), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("quantity >= 0", name="ck_stock_resources_quantity_non_negative"),
    )
    op.create_index("ix_stock_resources_kind", "stock_resources", ["kind"], unique=False)

    for table, extra in (
        ("employees", sa.Column("email", sa.String(length=150), nullable=True)),
        ("clients", sa.Column("email", sa.String(length=150), nullable=True)),
        ("suppliers", sa.Column("company_name", sa.String(length=150), nullable=True)),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.Uuid(), nullable=False),
            sa.Column("name", sa.String(length=150), nullable=False),
            extra,
            *_timestamps(),
            sa.PrimaryKeyConstraint("id"),
        )

    # --- Harvests --------------------------------------------------------
    op.create_table(
        "harvests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("crop_id", sa.Uuid(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("value_pay", sa.Integer(), nullable=False),
        sa.Column("observation", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["crop_id"], ["crops.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_harvests_crop_id", "harvests", ["crop_id"], unique=False)
    op.create_index("ix_harvests_date", "harvests", ["date"], unique=False)
    op.create_table(
        "harvest_details",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("harvest_id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("unit_of_measure", sa.String(length=20), nullable=False),
        sa.Column("value_pay", sa.Integer(), nullable=False),
        _lock_column(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["harvest_id"], ["harvests.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_harvest_details_harvest_id", "harvest_details", ["harvest_id"], unique=False)
    op.create_index("ix_harvest_details_employee_id", "harvest_details", ["employee_id"], unique=False)
    op.create_table(
        "harvests_processed",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("harvest_id", sa.Uuid(), nullable=False),
        sa.Column("crop_id", sa.Uuid(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("unit_of_measure", sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["harvest_id"], ["harvests.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["crop_id"], ["crops.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_harvests_processed_harvest_id", "harvests_processed", ["harvest_id"], unique=False)
    op.create_index("ix_harvests_processed_crop_id", "harvests_processed", ["crop_id"], unique=False)

    # --- Sales -----------------------------------------------------------
    op.create_table(
        "sales",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("value_pay", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sales_date", "sales", ["date"], unique=False)
    op.create_table(
        "sale_details",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("sale_id", sa.Uuid(), nullable=False),
        sa.Column("crop_id", sa.Uuid(), nullable=False),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("unit_of_measure", sa.String(length=20), nullable=False),
        sa.Column("value_pay", sa.Integer(), nullable=False),
        _lock_column(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["sale_id"], ["sales.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["crop_id"], ["crops.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sale_details_sale_id", "sale_details", ["sale_id"], unique=False)
    op.create_index("ix_sale_details_crop_id", "sale_details", ["crop_id"], unique=False)

    # --- Supplies purchases ----------------------------------------------
    op.create_table(
        "supplies_purchases",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("value_pay", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_supplies_purchases_date", "supplies_purchases", ["date"], unique=False)
    op.create_table(
        "supplies_purchase_details",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("purchase_id", sa.Uuid(), nullable=False),
        sa.Column("supply_id", sa.Uuid(), nullable=False),
        sa.Column("supplier_id", sa.Uuid(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("unit_of_measure", sa.String(length=20), nullable=False),
        sa.Column("value_pay", sa.Integer(), nullable=False),
        _lock_column(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["purchase_id"], ["supplies_purchases.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["supply_id"], ["supplies.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["supplier_id"], ["suppliers.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_supplies_purchase_details_purchase_id",
        "supplies_purchase_details",
        ["purchase_id"],
        unique=False,
    )
    op.create_index(
        "ix_supplies_purchase_details_supply_id",
        "supplies_purchase_details",
        ["supply_id"],
        unique=False,
    )

    # --- Supplies consumptions -------------------------------------------
    op.create_table(
        "supplies_consumptions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("observation", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_supplies_consumptions_date", "supplies_consumptions", ["date"], unique=False)
    op.create_table(
        "supplies_consumption_details",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("consumption_id", sa.Uuid(), nullable=False),
        sa.Column("supply_id", sa.Uuid(), nullable=False),
        sa.Column("crop_id", sa.Uuid(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("unit_of_measure", sa.String(length=20), nullable=False),
        _lock_column(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["consumption_id"], ["supplies_consumptions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["supply_id"], ["supplies.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["crop_id"], ["crops.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_supplies_consumption_details_consumption_id",
        "supplies_consumption_details",
        ["consumption_id"],
        unique=False,
    )
    op.create_index(
        "ix_supplies_consumption_details_supply_id",
        "supplies_consumption_details",
        ["supply_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_supplies_consumption_details_supply_id", table_name="supplies_consumption_details")
    op.drop_index("ix_supplies_consumption_details_consumption_id", table_name="supplies_consumption_details")
    op.drop_table("supplies_consumption_details")
    op.drop_index("ix_supplies_consumptions_date", table_name="supplies_consumptions")
    op.drop_table("supplies_consumptions")

    op.drop_index("ix_supplies_purchase_details_supply_id", table_name="supplies_purchase_details")
    op.drop_index("ix_supplies_purchase_details_purchase_id", table_name="supplies_purchase_details")
    op.drop_table("supplies_purchase_details")
    op.drop_index("ix_supplies_purchases_date", table_name="supplies_purchases")
    op.drop_table("supplies_purchases")

    op.drop_index("ix_sale_details_crop_id", table_name="sale_details")
    op.drop_index("ix_sale_details_sale_id", table_name="sale_details")
    op.drop_table("sale_details")
    op.drop_index("ix_sales_date", table_name="sales")
    op.drop_table("sales")

    op.drop_index("ix_harvests_processed_crop_id", table_name="harvests_processed")
    op.drop_index("ix_harvests_processed_harvest_id", table_name="harvests_processed")
    op.drop_table("harvests_processed")
    op.drop_index("ix_harvest_details_employee_id", table_name="harvest_details")
    op.drop_index("ix_harvest_details_harvest_id", table_name="harvest_details")
    op.drop_table("harvest_details")
    op.drop_index("ix_harvests_date", table_name="harvests")
    op.drop_index("ix_harvests_crop_id", table_name="harvests")
    op.drop_table("harvests")

    op.drop_table("suppliers")
    op.drop_table("clients")
    op.drop_table("employees")
    op.drop_index("ix_stock_resources_kind", table_name="stock_resources")
    op.drop_table("stock_resources")
    op.drop_table("supplies")
    op.drop_table("crops")
