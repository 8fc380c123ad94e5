"""
DPS facilitator exception hierarchy
"""

from enum import Enum


class InvoiceErrorReason(str, Enum):
    """Machine-readable reason attached to every invoice error"""

    NOT_FOUND = "not_found"
    MISSING_INVOICE_ID = "missing_invoice_id"
    EXPIRED = "expired"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_CONFIG = "invalid_config"


class DpsError(Exception):
    """DPS facilitator base exception"""

    pass


class DpsInvoiceError(DpsError):
    """Invoice lifecycle error

    Callers branch on ``reason`` rather than on the message text.
    """

    def __init__(self, reason: InvoiceErrorReason, message: str | None = None):
        self.reason = reason
        super().__init__(message or reason.value)


class InvoiceNotFoundError(DpsInvoiceError):
    """Invoice id is not known to the store"""

    def __init__(self, invoice_id: str):
        self.invoice_id = invoice_id
        super().__init__(InvoiceErrorReason.NOT_FOUND, f"DPS invoice not found: {invoice_id}")


class MissingInvoiceIdError(DpsInvoiceError):
    """Payment requirements carry no dpsInvoiceId"""

    def __init__(self, message: str = "Payment requirements carry no DPS invoice id"):
        super().__init__(InvoiceErrorReason.MISSING_INVOICE_ID, message)


class InvoiceExpiredError(DpsInvoiceError):
    """Invoice resolved but its quoting window has closed"""

    def __init__(self, invoice_id: str, expires_at: int):
        self.invoice_id = invoice_id
        self.expires_at = expires_at
        super().__init__(InvoiceErrorReason.EXPIRED, f"DPS invoice expired: {invoice_id}")


class InvalidAmountError(DpsInvoiceError):
    """Malformed or negative amount / basis points"""

    def __init__(self, message: str):
        super().__init__(InvoiceErrorReason.INVALID_AMOUNT, message)


class InvalidConfigError(DpsInvoiceError):
    """Invalid facilitator configuration"""

    def __init__(self, message: str):
        super().__init__(InvoiceErrorReason.INVALID_CONFIG, message)


class QuoteError(DpsError):
    """Dynamic quote error"""

    def __init__(self, reason: str, message: str | None = None):
        self.reason = reason
        super().__init__(message or reason)
