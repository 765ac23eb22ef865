"""ORM model definitions for the franchise billing domain."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from sqlalchemy import Boolean, Date, Enum as SQLEnum, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

DELETE_CASCADE = "all, delete-orphan"

UUID_STR = String(36)
MONEY = Numeric(18, 2)
PERCENT = Numeric(7, 2)
ZERO = Decimal("0.00")


def _new_id() -> str:
    return str(uuid4())


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class PaymentStatus(str, Enum):
    """Settlement state of an invoice."""

    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class InvoiceStatus(str, Enum):
    """Record state of an invoice; cancelled invoices form the recycle bin."""

    ACTIVE = "active"
    CANCELLED = "cancelled"


class Franchise(Base, TimestampMixin):
    """Franchise owning its own bookings and invoices."""

    id: Mapped[str] = mapped_column(UUID_STR, primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="franchise", cascade=DELETE_CASCADE)
    invoices: Mapped[list["Invoice"]] = relationship("Invoice", back_populates="franchise", cascade=DELETE_CASCADE)


class FranchiseScopedMixin(TimestampMixin):
    """Mixin for franchise-scoped entities."""

    franchise_id: Mapped[str] = mapped_column(
        UUID_STR, ForeignKey("franchises.id", ondelete="cascade"), nullable=False, index=True
    )


class Booking(FranchiseScopedMixin, Base):
    """Shipment booking; maintained by the bookings subsystem and only read here."""

    id: Mapped[str] = mapped_column(UUID_STR, primary_key=True, default=_new_id)
    customer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    consignment_no: Mapped[str | None] = mapped_column(String(64), nullable=True)
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    total: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)

    franchise: Mapped[Franchise] = relationship("Franchise", back_populates="bookings")

    __table_args__ = (
        Index("ix_booking_customer_date", "franchise_id", "customer_id", "booking_date"),
    )


class Invoice(FranchiseScopedMixin, Base):
    """Billing document issued by a franchise to a customer."""

    id: Mapped[str] = mapped_column(UUID_STR, primary_key=True, default=_new_id)
    invoice_number: Mapped[str] = mapped_column(String(64), nullable=False)
    invoice_date: Mapped[date] = mapped_column(Date, nullable=False)
    customer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    period_from: Mapped[date | None] = mapped_column(Date, nullable=True)
    period_to: Mapped[date | None] = mapped_column(Date, nullable=True)
    consignment_no: Mapped[str | None] = mapped_column(String(64), nullable=True)
    invoice_discount: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reverse_charge: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    fuel_surcharge_percent: Mapped[Decimal] = mapped_column(PERCENT, nullable=False, default=ZERO)
    fuel_surcharge_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    gst_percent: Mapped[Decimal] = mapped_column(PERCENT, nullable=False, default=ZERO)
    gst_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    other_charge: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    royalty_charge: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    docket_charge: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    subtotal_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    total_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    net_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus, name="payment_status", values_callable=_enum_values),
        default=PaymentStatus.UNPAID,
        nullable=False,
    )
    paid_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    balance_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    status: Mapped[InvoiceStatus] = mapped_column(
        SQLEnum(InvoiceStatus, name="invoice_status", values_callable=_enum_values),
        default=InvoiceStatus.ACTIVE,
        nullable=False,
    )

    franchise: Mapped[Franchise] = relationship("Franchise", back_populates="invoices")
    items: Mapped[list["InvoiceItem"]] = relationship(
        "InvoiceItem", back_populates="invoice", cascade=DELETE_CASCADE
    )

    __table_args__ = (
        Index("ix_invoice_payment_status", "franchise_id", "payment_status"),
        Index("ix_invoice_date", "franchise_id", "invoice_date"),
        UniqueConstraint("franchise_id", "invoice_number", name="uq_invoice_number_per_franchise"),
    )


class InvoiceItem(TimestampMixin, Base):
    """Line on an invoice, copied from a booking at generation time."""

    id: Mapped[str] = mapped_column(UUID_STR, primary_key=True, default=_new_id)
    invoice_id: Mapped[str] = mapped_column(
        UUID_STR, ForeignKey("invoices.id", ondelete="cascade"), nullable=False, index=True
    )
    booking_id: Mapped[str | None] = mapped_column(
        UUID_STR, ForeignKey("bookings.id", ondelete="set null"), nullable=True
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=ZERO)

    invoice: Mapped[Invoice] = relationship("Invoice", back_populates="items")


class InvoiceSequence(Base):
    """Last issued invoice number per franchise and calendar year."""

    id: Mapped[str] = mapped_column(UUID_STR, primary_key=True, default=_new_id)
    franchise_id: Mapped[str] = mapped_column(
        UUID_STR, ForeignKey("franchises.id", ondelete="cascade"), nullable=False
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    current_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("franchise_id", "year", name="uq_invoice_sequence_year"),
    )


__all__ = [
    "Franchise",
    "Booking",
    "Invoice",
    "InvoiceItem",
    "InvoiceSequence",
    "PaymentStatus",
    "InvoiceStatus",
]
