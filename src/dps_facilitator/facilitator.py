"""
DpsFacilitator - wires the invoice and quote stores behind one object
"""

import logging
from typing import Optional

from dps_facilitator.clock import Clock, SystemClock
from dps_facilitator.config import DpsConfig
from dps_facilitator.invoices import InvoiceStore
from dps_facilitator.linker import extract_invoice_id, extract_quote_id, has_invoice_id
from dps_facilitator.quotes import QuoteStore
from dps_facilitator.types import PaymentRequirements

logger = logging.getLogger(__name__)


class DpsFacilitator:
    """
    Facilitator state for one process.

    Owns an InvoiceStore and a QuoteStore sharing one clock. Construct one
    per host and pass it to whatever serves requests.
    """

    def __init__(self, config: DpsConfig, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or SystemClock()
        self.invoices = InvoiceStore(config, self._clock)
        self.quotes = QuoteStore(self.invoices, self._clock)

    @property
    def config(self) -> DpsConfig:
        return self.invoices.config

    def normalize(self, requirements: PaymentRequirements) -> PaymentRequirements:
        """
        Replace tagged requirements with their canonical stored copy.

        Quote-tagged requirements resolve through the quote store,
        invoice-tagged ones through the invoice store; untagged requirements
        are returned unchanged.
        """
        if extract_quote_id(requirements) is not None:
            return self.quotes.apply_quote(requirements)
        if has_invoice_id(requirements):
            return self.invoices.apply_invoice(requirements)
        return requirements

    def record_settlement(self, requirements: PaymentRequirements) -> Optional[str]:
        """
        Mark the invoice behind settled requirements as paid.

        Returns:
            The invoice id, or None when the requirements are not invoice-tagged
        """
        if not has_invoice_id(requirements):
            return None
        invoice_id = extract_invoice_id(requirements)
        self.invoices.mark_invoice_paid(invoice_id)
        logger.info(f"Recorded settlement for DPS invoice {invoice_id}")
        return invoice_id
