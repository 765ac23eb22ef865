"""Transactional invoice generation.

Every variant validates its request, then numbers the invoice, computes the
charges, inserts the invoice and copies the referenced bookings into
``invoice_items`` inside a single transaction. Any failure rolls the whole
write back.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date
from decimal import Decimal
from typing import TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from billing.core.database import transactional
from billing.core.franchise import FranchiseContext
from billing.core.settings import Settings, get_settings
from billing.db.models import Booking, Invoice, InvoiceItem, InvoiceStatus, PaymentStatus
from billing.repositories.booking import BookingRepository
from billing.schemas.invoice_generation import (
    BatchInvoiceGenerateRequest,
    ChargeFields,
    GeneratedInvoice,
    InvoiceGenerateRequest,
    InvoiceWithoutGstRequest,
    SingleInvoiceGenerateRequest,
)

from .charges import ZERO, batch_totals, fuel_surcharge_total, gst_amount, money, resolve_gst_percent, to_decimal
from .exceptions import ConflictError, MissingBookingError, ServiceError, ValidationError
from .numbering import WITHOUT_GST_SERIES, InvoiceNumberGenerator

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")

PERIOD_REQUIRED = "Customer ID, Period From, and Period To are required"
CUSTOMERS_REQUIRED = "Please select at least one customer"
BATCH_PERIOD_REQUIRED = "Period From and Period To are required"
SINGLE_REQUIRED = "Customer ID and Booking ID are required"


class InvoiceWriter:
    """Creates invoices and their items for one franchise."""

    def __init__(
        self,
        session: Session,
        franchise: FranchiseContext,
        settings: Settings | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.session = session
        self.franchise = franchise
        self.settings = settings or get_settings()
        self.today = today
        self.bookings = BookingRepository(session)

    def generate(self, payload: InvoiceGenerateRequest) -> GeneratedInvoice:
        """Invoice a customer for an explicit list of bookings."""

        if not payload.customer_id or not payload.period_from or not payload.period_to:
            raise ValidationError(PERIOD_REQUIRED)

        def write(numbers: InvoiceNumberGenerator) -> Invoice:
            invoice = self._new_invoice(
                payload,
                invoice_number=numbers.next_number(payload.invoice_no),
                gst_percent=resolve_gst_percent(payload.gst_percent, self.settings.default_gst_percent),
                fuel_surcharge_percent=to_decimal(payload.fuel_surcharge_tax_percent),
                customer_id=payload.customer_id,
                period_from=payload.period_from,
                period_to=payload.period_to,
            )
            self._attach_bookings(invoice, payload.bookings)
            return invoice

        invoice = self._write(write)
        logger.info(
            "Generated invoice %s for customer %s with %s item(s)",
            invoice.invoice_number,
            invoice.customer_id,
            len(invoice.items),
        )
        return GeneratedInvoice(id=invoice.id, invoice_number=invoice.invoice_number)

    def generate_batch(self, payload: BatchInvoiceGenerateRequest) -> int:
        """Invoice every listed customer for their bookings in the period; returns how many were created."""

        if not payload.customers:
            raise ValidationError(CUSTOMERS_REQUIRED)
        if not payload.period_from or not payload.period_to:
            raise ValidationError(BATCH_PERIOD_REQUIRED)

        gst_percent = resolve_gst_percent(payload.gst_percent, self.settings.default_gst_percent)
        invoice_date = payload.invoice_date or self.today()

        def write(numbers: InvoiceNumberGenerator) -> int:
            created = 0
            for customer_id in payload.customers:
                bookings = self.bookings.list_for_customer_in_period(
                    self.franchise, customer_id, payload.period_from, payload.period_to
                )
                if not bookings:
                    logger.info("No bookings for customer %s in period, skipping", customer_id)
                    continue

                totals = batch_totals((booking.total for booking in bookings), gst_percent)
                invoice = Invoice(
                    franchise_id=self.franchise.franchise_id,
                    invoice_number=numbers.next_number(),
                    invoice_date=invoice_date,
                    customer_id=customer_id,
                    period_from=payload.period_from,
                    period_to=payload.period_to,
                    gst_percent=totals.gst_percent,
                    gst_amount=totals.gst_amount,
                    subtotal_amount=totals.subtotal,
                    total_amount=totals.subtotal,
                    net_amount=totals.net_amount,
                    payment_status=PaymentStatus.UNPAID,
                    paid_amount=ZERO,
                    balance_amount=totals.net_amount,
                    status=InvoiceStatus.ACTIVE,
                )
                for booking in bookings:
                    invoice.items.append(self._item_for(booking))
                self.session.add(invoice)
                self.session.flush()
                created += 1
            return created

        created = self._write(write)
        logger.info(
            "Generated %s invoice(s) for %s customer(s) of franchise %s",
            created,
            len(payload.customers),
            self.franchise.franchise_id,
        )
        return created

    def generate_single(self, payload: SingleInvoiceGenerateRequest) -> GeneratedInvoice:
        """Invoice exactly one booking; the invoice carries its consignment number."""

        if not payload.customer_id or not payload.booking_id:
            raise ValidationError(SINGLE_REQUIRED)

        def write(numbers: InvoiceNumberGenerator) -> Invoice:
            booking = self._resolve_booking(payload.booking_id)
            consignment_no = payload.consignment_no or (booking.consignment_no if booking else None)
            invoice = self._new_invoice(
                payload,
                invoice_number=numbers.next_number(payload.invoice_no),
                gst_percent=resolve_gst_percent(payload.gst_percent, self.settings.default_gst_percent),
                fuel_surcharge_percent=to_decimal(payload.fuel_surcharge_tax_percent),
                customer_id=payload.customer_id,
                period_from=payload.period_from,
                period_to=payload.period_to,
                consignment_no=consignment_no,
            )
            if booking is not None:
                invoice.items.append(self._item_for(booking))
            self.session.flush()
            return invoice

        invoice = self._write(write)
        logger.info(
            "Generated single invoice %s for consignment %s",
            invoice.invoice_number,
            invoice.consignment_no,
        )
        return GeneratedInvoice(id=invoice.id, invoice_number=invoice.invoice_number)

    def generate_without_gst(self, payload: InvoiceWithoutGstRequest) -> GeneratedInvoice:
        """Invoice bookings in the WG series, with GST and fuel surcharge forced to zero."""

        if not payload.customer_id or not payload.period_from or not payload.period_to:
            raise ValidationError(PERIOD_REQUIRED)

        def write(numbers: InvoiceNumberGenerator) -> Invoice:
            invoice = self._new_invoice(
                payload,
                invoice_number=numbers.next_number(series=WITHOUT_GST_SERIES),
                gst_percent=ZERO,
                fuel_surcharge_percent=ZERO,
                customer_id=payload.customer_id,
                period_from=payload.period_from,
                period_to=payload.period_to,
            )
            self._attach_bookings(invoice, payload.bookings)
            return invoice

        invoice = self._write(write)
        logger.info("Generated invoice %s without GST for customer %s", invoice.invoice_number, invoice.customer_id)
        return GeneratedInvoice(id=invoice.id, invoice_number=invoice.invoice_number)

    def _write(self, action: Callable[[InvoiceNumberGenerator], ResultT]) -> ResultT:
        numbers = InvoiceNumberGenerator(self.session, self.franchise, today=self.today)
        try:
            with transactional(self.session):
                return action(numbers)
        except IntegrityError as exc:
            logger.warning("Invoice write for franchise %s conflicted: %s", self.franchise.franchise_id, exc.orig)
            raise ConflictError("Invoice number already exists") from exc
        except SQLAlchemyError as exc:
            logger.exception("Invoice write for franchise %s rolled back", self.franchise.franchise_id)
            raise ServiceError("Failed to generate invoice") from exc

    def _new_invoice(
        self,
        payload: ChargeFields,
        *,
        invoice_number: str,
        gst_percent: Decimal,
        fuel_surcharge_percent: Decimal,
        customer_id: str,
        period_from: date | None,
        period_to: date | None,
        consignment_no: str | None = None,
    ) -> Invoice:
        subtotal = money(payload.subtotal)
        net_amount = money(payload.net_amount)
        invoice = Invoice(
            franchise_id=self.franchise.franchise_id,
            invoice_number=invoice_number,
            invoice_date=payload.invoice_date or self.today(),
            customer_id=customer_id,
            address=payload.address,
            period_from=period_from,
            period_to=period_to,
            consignment_no=consignment_no,
            invoice_discount=payload.invoice_discount,
            reverse_charge=payload.reverse_charge,
            fuel_surcharge_percent=fuel_surcharge_percent,
            fuel_surcharge_total=fuel_surcharge_total(subtotal, fuel_surcharge_percent),
            gst_percent=gst_percent,
            gst_amount=gst_amount(net_amount, gst_percent),
            other_charge=money(payload.other_charge),
            royalty_charge=money(payload.royalty_charge),
            docket_charge=money(payload.docket_charge),
            subtotal_amount=subtotal,
            total_amount=money(payload.total),
            net_amount=net_amount,
            payment_status=PaymentStatus.UNPAID,
            paid_amount=ZERO,
            balance_amount=net_amount,
            status=InvoiceStatus.ACTIVE,
        )
        self.session.add(invoice)
        return invoice

    def _attach_bookings(self, invoice: Invoice, booking_ids: Iterable[str]) -> None:
        booking_ids = list(booking_ids)
        found = self.bookings.get_many(self.franchise, booking_ids)
        for booking_id in booking_ids:
            booking = found.get(booking_id)
            if booking is None:
                self._missing_booking(booking_id)
                continue
            invoice.items.append(self._item_for(booking))
        self.session.flush()

    def _resolve_booking(self, booking_id: str) -> Booking | None:
        booking = self.bookings.get_for_franchise(self.franchise, booking_id)
        if booking is None:
            self._missing_booking(booking_id)
        return booking

    def _missing_booking(self, booking_id: str) -> None:
        if self.settings.strict_booking_references:
            raise MissingBookingError(f"Booking {booking_id} not found")
        logger.warning(
            "Booking %s not found for franchise %s, no invoice item created",
            booking_id,
            self.franchise.franchise_id,
        )

    @staticmethod
    def _item_for(booking: Booking) -> InvoiceItem:
        amount = money(booking.total)
        return InvoiceItem(
            booking_id=booking.id,
            description=f"Booking: {booking.consignment_no or ''}",
            quantity=1,
            unit_price=amount,
            amount=amount,
        )
