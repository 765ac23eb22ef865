"""Sequential invoice numbers per franchise and calendar year."""
from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date

from sqlalchemy.orm import Session

from billing.core.franchise import FranchiseContext
from billing.db.models import InvoiceSequence
from billing.repositories.invoice import InvoiceRepository
from billing.repositories.sequence import InvoiceSequenceRepository

logger = logging.getLogger(__name__)

INVOICE_PREFIX = "INV"
WITHOUT_GST_SERIES = "WG"
SEQUENCE_WIDTH = 4
GENERATED_NUMBER = re.compile(rf"^{INVOICE_PREFIX}/(?P<year>\d{{4}})/(?:{WITHOUT_GST_SERIES}/)?(?P<sequence>\d+)$")


def format_invoice_number(year: int, sequence: int, series: str | None = None) -> str:
    """Render ``INV/<year>/<seq>``, or ``INV/<year>/<series>/<seq>`` for a named series."""

    parts = [INVOICE_PREFIX, f"{year:04d}"]
    if series:
        parts.append(series)
    parts.append(str(sequence).zfill(SEQUENCE_WIDTH))
    return "/".join(parts)


class InvoiceNumberGenerator:
    """Hands out invoice numbers inside the caller's transaction.

    The first call locks the franchise's counter row for the current year
    (creating it from the number of invoices already dated this year) and later
    calls keep incrementing it, so a batch receives consecutive numbers. The
    lock is released when the surrounding transaction commits or rolls back.
    """

    def __init__(
        self,
        session: Session,
        franchise: FranchiseContext,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.session = session
        self.franchise = franchise
        self.today = today
        self.invoices = InvoiceRepository(session)
        self.sequences = InvoiceSequenceRepository(session)
        self._sequence: InvoiceSequence | None = None

    def next_number(self, explicit: str | None = None, series: str | None = None) -> str:
        if explicit:
            self._reserve(explicit)
            return explicit

        sequence = self._locked_sequence()
        sequence.current_number += 1
        self.session.flush()
        return format_invoice_number(sequence.year, sequence.current_number, series)

    def _reserve(self, explicit: str) -> None:
        """Move the counter past an explicit number taken from this year's series."""

        match = GENERATED_NUMBER.match(explicit)
        if match is None or int(match.group("year")) != self.today().year:
            return

        sequence = self._locked_sequence()
        taken = int(match.group("sequence"))
        if taken > sequence.current_number:
            logger.info(
                "Advancing invoice sequence for franchise %s from %s to %s",
                self.franchise.franchise_id,
                sequence.current_number,
                taken,
            )
            sequence.current_number = taken
            self.session.flush()

    def _locked_sequence(self) -> InvoiceSequence:
        year = self.today().year
        if self._sequence is not None and self._sequence.year == year:
            return self._sequence

        sequence = self.sequences.lock_for_year(self.franchise, year)
        if sequence is None:
            existing = self.invoices.count_for_year(self.franchise, year)
            logger.info(
                "Starting invoice sequence for franchise %s, year %s at %s",
                self.franchise.franchise_id,
                year,
                existing,
            )
            sequence = self.sequences.create(self.franchise, year, existing)
        self._sequence = sequence
        return sequence
