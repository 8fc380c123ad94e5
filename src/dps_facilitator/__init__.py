"""
dps_facilitator - fee invoices for x402 payment facilitation

Issues short-lived invoices that add a facilitator fee on top of a seller's
negotiated amount, and resolves tagged payment requirements back to them.
"""

__version__ = "0.1.0"

from dps_facilitator.clock import Clock, SystemClock
from dps_facilitator.config import DpsConfig, load_config, validate_config
from dps_facilitator.exceptions import (
    DpsError,
    DpsInvoiceError,
    InvalidAmountError,
    InvalidConfigError,
    InvoiceErrorReason,
    InvoiceExpiredError,
    InvoiceNotFoundError,
    MissingInvoiceIdError,
    QuoteError,
)
from dps_facilitator.facilitator import DpsFacilitator
from dps_facilitator.fees import compute_fee
from dps_facilitator.invoices import InvoiceStore
from dps_facilitator.linker import extract_invoice_id, link_requirements, resolve_pay_to
from dps_facilitator.quotes import QuoteStore
from dps_facilitator.types import (
    DPS_INVOICE_ID_KEY,
    DYNAMIC_QUOTE_ID_KEY,
    Invoice,
    PaymentRequirements,
    Quote,
    QuoteCreation,
)

__all__ = [
    "__version__",
    # Types
    "PaymentRequirements",
    "Invoice",
    "Quote",
    "QuoteCreation",
    "DPS_INVOICE_ID_KEY",
    "DYNAMIC_QUOTE_ID_KEY",
    # Exceptions
    "DpsError",
    "DpsInvoiceError",
    "InvoiceErrorReason",
    "InvoiceNotFoundError",
    "MissingInvoiceIdError",
    "InvoiceExpiredError",
    "InvalidAmountError",
    "InvalidConfigError",
    "QuoteError",
    # Core
    "Clock",
    "SystemClock",
    "DpsConfig",
    "load_config",
    "validate_config",
    "compute_fee",
    "link_requirements",
    "extract_invoice_id",
    "resolve_pay_to",
    "InvoiceStore",
    "QuoteStore",
    "DpsFacilitator",
]
