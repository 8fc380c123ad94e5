"""
Dynamic quotes - seller requirements pinned to a negotiated amount and
released only once the DPS fee invoice for them is paid
"""

import logging
import threading
from typing import Optional

from dps_facilitator.clock import Clock
from dps_facilitator.exceptions import InvalidAmountError, QuoteError
from dps_facilitator.fees import parse_atomic
from dps_facilitator.invoices import InvoiceStore
from dps_facilitator.linker import extract_quote_id
from dps_facilitator.types import (
    DPS_INVOICE_ID_KEY,
    DYNAMIC_QUOTE_ID_KEY,
    PaymentRequirements,
    Quote,
    QuoteCreation,
)
from dps_facilitator.utils.ids import generate_quote_id

logger = logging.getLogger(__name__)

DEFAULT_QUOTE_TTL_SECONDS = 300
MAX_QUOTE_TTL_SECONDS = 3600


class QuoteStore:
    """In-memory dynamic quote store backed by an InvoiceStore"""

    def __init__(self, invoice_store: InvoiceStore, clock: Optional[Clock] = None) -> None:
        self._invoice_store = invoice_store
        self._clock: Clock = clock or invoice_store.clock
        self._quotes: dict[str, Quote] = {}
        self._lock = threading.Lock()

    def create_quote(
        self,
        payment_requirements: PaymentRequirements,
        negotiated_amount: str,
        ttl_seconds: Optional[int] = None,
    ) -> QuoteCreation:
        """
        Pin seller requirements to a negotiated amount and issue its fee invoice.

        Args:
            payment_requirements: Seller requirements
            negotiated_amount: Agreed amount, atomic units
            ttl_seconds: Quote lifetime, defaults to DEFAULT_QUOTE_TTL_SECONDS

        Returns:
            QuoteCreation with the quote and its DPS invoice

        Raises:
            QuoteError: If the amount or ttl is invalid
        """
        try:
            parse_atomic(negotiated_amount, "negotiated_amount")
        except InvalidAmountError as e:
            raise QuoteError("invalid_amount", str(e)) from e
        ttl = self._validate_ttl(ttl_seconds)

        invoice = self._invoice_store.create_invoice(payment_requirements, negotiated_amount)

        with self._lock:
            quote_id = generate_quote_id()
            while quote_id in self._quotes:
                quote_id = generate_quote_id()

            requirements = self._decorate(payment_requirements, quote_id, negotiated_amount, invoice.id)
            created_at = self._clock.now()
            quote = Quote(
                id=quote_id,
                payment_requirements=requirements,
                negotiated_amount=negotiated_amount,
                created_at=created_at,
                expires_at=created_at + ttl * 1000,
                dps_invoice_id=invoice.id,
            )
            self._quotes[quote_id] = quote

        logger.debug(f"Created dynamic quote {quote_id}: amount={negotiated_amount} invoice={invoice.id}")
        return QuoteCreation(quote=quote.model_copy(deep=True), invoice=invoice)

    def apply_quote(self, payment_requirements: PaymentRequirements) -> PaymentRequirements:
        """
        Resolve quote-tagged requirements to the stored copy.

        Raises:
            QuoteError: missing_quote_id, quote_not_found, quote_expired or
                invoice_unpaid
        """
        quote_id = extract_quote_id(payment_requirements)
        if quote_id is None:
            raise QuoteError("missing_quote_id", "Payment requirements carry no dynamic quote id")

        with self._lock:
            quote = self._quotes.get(quote_id)
            if quote is None:
                raise QuoteError("quote_not_found", "Dynamic quote not found")
            requirements = quote.payment_requirements.model_copy(deep=True)
            expires_at = quote.expires_at
            invoice_id = quote.dps_invoice_id

        if self._clock.now() >= expires_at:
            raise QuoteError("quote_expired", "Dynamic quote expired")

        if not self._invoice_store.is_invoice_paid(invoice_id):
            raise QuoteError("invoice_unpaid", "Dynamic quote blocked until DPS fee is paid")

        return requirements

    def _decorate(
        self,
        requirements: PaymentRequirements,
        quote_id: str,
        negotiated_amount: str,
        invoice_id: str,
    ) -> PaymentRequirements:
        update: dict = {
            "extra": {
                **(requirements.extra or {}),
                DYNAMIC_QUOTE_ID_KEY: quote_id,
                DPS_INVOICE_ID_KEY: invoice_id,
            },
        }
        if requirements.amount is not None:
            update["amount"] = negotiated_amount
        if requirements.max_amount_required is not None or requirements.amount is None:
            update["max_amount_required"] = negotiated_amount
        return requirements.model_copy(deep=True, update=update)

    @staticmethod
    def _validate_ttl(ttl_seconds: Optional[int]) -> int:
        if ttl_seconds is None:
            return DEFAULT_QUOTE_TTL_SECONDS
        if (
            isinstance(ttl_seconds, bool)
            or not isinstance(ttl_seconds, int)
            or ttl_seconds <= 0
            or ttl_seconds > MAX_QUOTE_TTL_SECONDS
        ):
            raise QuoteError(
                "invalid_ttl",
                f"ttlSeconds must be an integer between 1 and {MAX_QUOTE_TTL_SECONDS}",
            )
        return ttl_seconds
