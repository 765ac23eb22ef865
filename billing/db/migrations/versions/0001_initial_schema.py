"""Initial schema for the franchise billing domain.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None

payment_status_enum = sa.Enum("unpaid", "partial", "paid", name="payment_status")
invoice_status_enum = sa.Enum("active", "cancelled", name="invoice_status")
FRANCHISE_PK = "franchises.id"


def _money(name: str) -> sa.Column:
    return sa.Column(name, sa.Numeric(18, 2), nullable=False, server_default="0")


def _percent(name: str) -> sa.Column:
    return sa.Column(name, sa.Numeric(7, 2), nullable=False, server_default="0")


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")
    )


def upgrade() -> None:
    bind = op.get_bind()
    payment_status_enum.create(bind, checkfirst=True)
    invoice_status_enum.create(bind, checkfirst=True)

    op.create_table(
        "franchises",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        _created_at(),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("franchise_id", sa.String(length=36), nullable=False),
        sa.Column("customer_id", sa.String(length=64), nullable=False),
        sa.Column("consignment_no", sa.String(length=64), nullable=True),
        sa.Column("booking_date", sa.Date(), nullable=False),
        _money("total"),
        _created_at(),
        sa.ForeignKeyConstraint(["franchise_id"], [FRANCHISE_PK], ondelete="CASCADE"),
    )

    op.create_table(
        "invoices",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("franchise_id", sa.String(length=36), nullable=False),
        sa.Column("invoice_number", sa.String(length=64), nullable=False),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("customer_id", sa.String(length=64), nullable=False),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("period_from", sa.Date(), nullable=True),
        sa.Column("period_to", sa.Date(), nullable=True),
        sa.Column("consignment_no", sa.String(length=64), nullable=True),
        sa.Column("invoice_discount", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("reverse_charge", sa.Boolean(), nullable=False, server_default=sa.false()),
        _percent("fuel_surcharge_percent"),
        _money("fuel_surcharge_total"),
        _percent("gst_percent"),
        _money("gst_amount"),
        _money("other_charge"),
        _money("royalty_charge"),
        _money("docket_charge"),
        _money("subtotal_amount"),
        _money("total_amount"),
        _money("net_amount"),
        sa.Column("payment_status", payment_status_enum, nullable=False, server_default="unpaid"),
        _money("paid_amount"),
        _money("balance_amount"),
        sa.Column("status", invoice_status_enum, nullable=False, server_default="active"),
        _created_at(),
        sa.ForeignKeyConstraint(["franchise_id"], [FRANCHISE_PK], ondelete="CASCADE"),
        sa.UniqueConstraint("franchise_id", "invoice_number", name="uq_invoice_number_per_franchise"),
    )

    op.create_table(
        "invoice_items",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("invoice_id", sa.String(length=36), nullable=False),
        sa.Column("booking_id", sa.String(length=36), nullable=True),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        _money("unit_price"),
        _money("amount"),
        _created_at(),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="SET NULL"),
    )

    op.create_table(
        "invoice_sequences",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("franchise_id", sa.String(length=36), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("current_number", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["franchise_id"], [FRANCHISE_PK], ondelete="CASCADE"),
        sa.UniqueConstraint("franchise_id", "year", name="uq_invoice_sequence_year"),
    )

    op.create_index("ix_bookings_franchise_id", "bookings", ["franchise_id"])
    op.create_index("ix_booking_customer_date", "bookings", ["franchise_id", "customer_id", "booking_date"])
    op.create_index("ix_invoices_franchise_id", "invoices", ["franchise_id"])
    op.create_index("ix_invoice_payment_status", "invoices", ["franchise_id", "payment_status"])
    op.create_index("ix_invoice_date", "invoices", ["franchise_id", "invoice_date"])
    op.create_index("ix_invoice_items_invoice_id", "invoice_items", ["invoice_id"])


def downgrade() -> None:
    op.drop_index("ix_invoice_items_invoice_id", table_name="invoice_items")
    op.drop_index("ix_invoice_date", table_name="invoices")
    op.drop_index("ix_invoice_payment_status", table_name="invoices")
    op.drop_index("ix_invoices_franchise_id", table_name="invoices")
    op.drop_index("ix_booking_customer_date", table_name="bookings")
    op.drop_index("ix_bookings_franchise_id", table_name="bookings")

    op.drop_table("invoice_sequences")
    op.drop_table("invoice_items")
    op.drop_table("invoices")
    op.drop_table("bookings")
    op.drop_table("franchises")

    bind = op.get_bind()
    invoice_status_enum.drop(bind, checkfirst=True)
    payment_status_enum.drop(bind, checkfirst=True)
