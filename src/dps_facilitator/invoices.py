"""
DPS invoice store - issues, resolves and settles facilitator fee invoices
"""

import logging
import threading
from typing import Optional

from dps_facilitator.clock import Clock, SystemClock
from dps_facilitator.config import DpsConfig, validate_config, validate_ttl_seconds
from dps_facilitator.exceptions import InvoiceExpiredError, InvoiceNotFoundError
from dps_facilitator.fees import compute_fee, parse_atomic
from dps_facilitator.linker import extract_invoice_id, link_requirements, resolve_pay_to
from dps_facilitator.types import Invoice, PaymentRequirements
from dps_facilitator.utils.ids import generate_invoice_id

logger = logging.getLogger(__name__)


class InvoiceStore:
    """
    In-memory invoice store.

    Invoices live for the lifetime of the store. Expired invoices stay
    indexed so their ids are never reused, but no longer resolve.
    All methods are safe to call from multiple threads.
    """

    def __init__(self, config: DpsConfig, clock: Optional[Clock] = None) -> None:
        self._config = validate_config(config)
        self._clock: Clock = clock or SystemClock()
        self._invoices: dict[str, Invoice] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> DpsConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    def create_invoice(
        self,
        base_requirements: PaymentRequirements,
        negotiated_amount: str,
        ttl_seconds: Optional[int] = None,
    ) -> Invoice:
        """
        Issue a fee invoice for a negotiated amount.

        Args:
            base_requirements: Seller requirements; supplies network, asset,
                scheme and any extra metadata
            negotiated_amount: Buyer/seller amount before the fee, atomic units
            ttl_seconds: Override of the configured invoice ttl

        Returns:
            The new invoice

        Raises:
            InvalidAmountError: If negotiated_amount is malformed
            InvalidConfigError: If ttl_seconds is out of range or no payout
                address is configured for the network
        """
        config = self._config
        parse_atomic(negotiated_amount, "negotiated_amount")
        ttl = validate_ttl_seconds(
            config.invoice_ttl_seconds if ttl_seconds is None else ttl_seconds,
            "ttl_seconds",
        )
        fee = compute_fee(negotiated_amount, config.fee_basis_points, config.min_fee_atomic_units)
        pay_to = resolve_pay_to(
            base_requirements.network,
            evm_pay_to=config.evm_pay_to,
            svm_pay_to=config.svm_pay_to,
            svm_networks=config.svm_networks,
        )

        with self._lock:
            invoice_id = generate_invoice_id()
            while invoice_id in self._invoices:
                invoice_id = generate_invoice_id()

            requirements = link_requirements(
                invoice_id,
                base_requirements.model_copy(deep=True),
                amount=fee,
                pay_to=pay_to,
                resource=config.resource_url,
                description=config.description,
                mime_type=config.mime_type,
                max_timeout_seconds=config.max_timeout_seconds,
            )
            created_at = self._clock.now()
            invoice = Invoice(
                id=invoice_id,
                amount=fee,
                payment_requirements=requirements,
                created_at=created_at,
                expires_at=created_at + ttl * 1000,
                paid=False,
            )
            self._invoices[invoice_id] = invoice

        logger.debug(
            f"Issued DPS invoice {invoice_id}: fee={fee} network={requirements.network} "
            f"expires_at={invoice.expires_at}"
        )
        return invoice.model_copy(deep=True)

    def apply_invoice(self, payment_requirements: PaymentRequirements) -> PaymentRequirements:
        """
        Resolve presented requirements to the canonical stored copy.

        The presented object is only used to find the invoice id; every
        field of the result comes from the store.

        Raises:
            MissingInvoiceIdError: If no dpsInvoiceId is present
            InvoiceNotFoundError: If the id is unknown
            InvoiceExpiredError: If the invoice window has closed
        """
        invoice_id = extract_invoice_id(payment_requirements)
        with self._lock:
            invoice = self._get(invoice_id)
            requirements = invoice.payment_requirements.model_copy(deep=True)
            expires_at = invoice.expires_at

        if self._clock.now() >= expires_at:
            raise InvoiceExpiredError(invoice_id, expires_at)
        return requirements

    def mark_invoice_paid(self, invoice_id: str) -> None:
        """
        Mark an invoice paid. Expired invoices can still be settled.

        Raises:
            InvoiceNotFoundError: If the id is unknown
        """
        with self._lock:
            invoice = self._get(invoice_id)
            already_paid = invoice.paid
            invoice.paid = True

        if not already_paid:
            logger.debug(f"DPS invoice {invoice_id} marked paid")

    def is_invoice_paid(self, invoice_id: str) -> bool:
        """
        Raises:
            InvoiceNotFoundError: If the id is unknown
        """
        with self._lock:
            return self._get(invoice_id).paid

    def get_invoice(self, invoice_id: str) -> Invoice:
        """Snapshot of a stored invoice"""
        with self._lock:
            return self._get(invoice_id).model_copy(deep=True)

    def _get(self, invoice_id: str) -> Invoice:
        """Lookup, caller holds the lock"""
        invoice = self._invoices.get(invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        return invoice
