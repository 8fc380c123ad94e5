"""
FastAPI application exposing DPS invoices and dynamic quotes
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dps_facilitator.exceptions import DpsError, DpsInvoiceError, InvoiceErrorReason
from dps_facilitator.facilitator import DpsFacilitator
from dps_facilitator.logging_config import get_logger
from dps_facilitator.types import (
    CreateInvoiceRequest,
    CreateQuoteRequest,
    Invoice,
    QuoteResponse,
    RequirementsRequest,
)

logger = get_logger(__name__)

_NOT_FOUND_REASONS = {InvoiceErrorReason.NOT_FOUND.value, "quote_not_found"}
_CONFLICT_REASONS = {InvoiceErrorReason.EXPIRED.value, "quote_expired", "invoice_unpaid"}


def to_iso(epoch_ms: int) -> str:
    """Epoch milliseconds as an ISO-8601 UTC string with millisecond precision"""
    seconds, millis = divmod(epoch_ms, 1000)
    stamp = datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    return f"{stamp}.{millis:03d}Z"


def error_status(error: DpsError) -> int:
    """HTTP status for a DPS error reason"""
    reason = getattr(error, "reason", None)
    if isinstance(reason, InvoiceErrorReason):
        reason = reason.value
    if reason in _NOT_FOUND_REASONS:
        return 404
    if reason in _CONFLICT_REASONS:
        return 409
    return 400


def _invoice_body(invoice: Invoice) -> dict[str, Any]:
    body = invoice.model_dump(by_alias=True, exclude_none=True)
    body["paymentRequirements"] = invoice.payment_requirements.to_wire()
    return body


def create_app(facilitator: DpsFacilitator) -> FastAPI:
    """
    Build the HTTP host around a facilitator instance.

    Args:
        facilitator: Facilitator state shared by all requests

    Returns:
        FastAPI application
    """
    app = FastAPI(
        title="DPS Facilitator",
        description="Dynamic pricing fee invoices for x402 payments",
        version="1.0.0",
    )
    app.state.facilitator = facilitator

    @app.exception_handler(DpsError)
    async def handle_dps_error(request: Request, exc: DpsError) -> JSONResponse:
        reason = exc.reason.value if isinstance(exc, DpsInvoiceError) else getattr(exc, "reason", None)
        status = error_status(exc)
        logger.info(f"{request.method} {request.url.path} rejected: {reason} ({status})")
        return JSONResponse(status_code=status, content={"error": str(exc), "reason": reason})

    @app.get("/")
    async def root():
        """Service info endpoint"""
        config = facilitator.config
        return {
            "service": "DPS Facilitator",
            "status": "running",
            "resource": config.resource_url,
            "feeBasisPoints": config.fee_basis_points,
            "minFeeAtomicUnits": config.min_fee_atomic_units,
            "invoiceTtlSeconds": config.invoice_ttl_seconds,
        }

    @app.post("/dps/invoices")
    async def create_invoice(body: CreateInvoiceRequest):
        """Issue a fee invoice"""
        invoice = facilitator.invoices.create_invoice(
            body.payment_requirements,
            str(body.negotiated_amount),
            ttl_seconds=body.ttl_seconds,
        )
        logger.info(f"/dps/invoices {invoice.id} amount={invoice.amount} expires={to_iso(invoice.expires_at)}")
        return _invoice_body(invoice)

    @app.post("/dps/invoices/apply")
    async def apply_invoice(body: RequirementsRequest):
        """Resolve invoice-tagged requirements to the canonical copy"""
        requirements = facilitator.invoices.apply_invoice(body.payment_requirements)
        return requirements.to_wire()

    @app.get("/dps/invoices/{invoice_id}")
    async def get_invoice(invoice_id: str):
        """Get invoice status"""
        return _invoice_body(facilitator.invoices.get_invoice(invoice_id))

    @app.post("/dps/invoices/{invoice_id}/paid")
    async def mark_invoice_paid(invoice_id: str):
        """Mark an invoice paid"""
        facilitator.invoices.mark_invoice_paid(invoice_id)
        logger.info(f"/dps/invoices/{invoice_id}/paid")
        return {"id": invoice_id, "paid": facilitator.invoices.is_invoice_paid(invoice_id)}

    @app.post("/dps/quote")
    async def create_quote(body: CreateQuoteRequest):
        """Create a dynamic quote and its DPS fee invoice"""
        created = facilitator.quotes.create_quote(
            body.payment_requirements,
            str(body.negotiated_amount),
            ttl_seconds=body.ttl_seconds,
        )
        quote, invoice = created.quote, created.invoice
        logger.info(
            f"/dps/quote {quote.id} amount={quote.negotiated_amount} expires={to_iso(quote.expires_at)}"
        )
        response = QuoteResponse(
            quote_id=quote.id,
            negotiated_amount=quote.negotiated_amount,
            expires_at=to_iso(quote.expires_at),
            payment_requirements=quote.payment_requirements.to_wire(),
            dps_payment_requirements=invoice.payment_requirements.to_wire(),
            dps_invoice_id=invoice.id,
            dps_invoice_expires_at=to_iso(invoice.expires_at),
        )
        return response.model_dump(by_alias=True)

    @app.post("/normalize")
    async def normalize(body: RequirementsRequest):
        """Resolve quote- or invoice-tagged requirements, pass others through"""
        return facilitator.normalize(body.payment_requirements).to_wire()

    return app
