"""
Type definitions for the DPS facilitator
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field, model_validator

# Keys injected into PaymentRequirements.extra
DPS_INVOICE_ID_KEY = "dpsInvoiceId"
DYNAMIC_QUOTE_ID_KEY = "dynamicQuoteId"


class PaymentRequirements(BaseModel):
    """Payment requirements, x402 v1 (maxAmountRequired) or v2 (amount) shape"""

    scheme: str
    network: str
    max_amount_required: Optional[str] = Field(None, alias="maxAmountRequired")
    amount: Optional[str] = None
    resource: Optional[str] = None
    description: Optional[str] = None
    mime_type: Optional[str] = Field(None, alias="mimeType")
    pay_to: str = Field(alias="payTo")
    max_timeout_seconds: Optional[int] = Field(None, alias="maxTimeoutSeconds")
    asset: str
    extra: Optional[dict[str, Any]] = None

    class Config:
        populate_by_name = True
        extra = "allow"

    @model_validator(mode="after")
    def require_amount(self) -> "PaymentRequirements":
        if self.max_amount_required is None and self.amount is None:
            raise ValueError("maxAmountRequired or amount is required")
        return self

    @property
    def amount_value(self) -> str:
        """Amount in atomic units, whichever field carries it"""
        if self.max_amount_required is not None:
            return self.max_amount_required
        return self.amount  # type: ignore[return-value]

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys, dropping unset optionals"""
        return self.model_dump(by_alias=True, exclude_none=True)


class Invoice(BaseModel):
    """DPS fee invoice"""

    id: str
    amount: str
    payment_requirements: PaymentRequirements = Field(alias="paymentRequirements")
    created_at: int = Field(alias="createdAt")
    expires_at: int = Field(alias="expiresAt")
    paid: bool = False

    class Config:
        populate_by_name = True


class Quote(BaseModel):
    """Dynamic quote pinned to a negotiated amount"""

    id: str
    payment_requirements: PaymentRequirements = Field(alias="paymentRequirements")
    negotiated_amount: str = Field(alias="negotiatedAmount")
    created_at: int = Field(alias="createdAt")
    expires_at: int = Field(alias="expiresAt")
    dps_invoice_id: str = Field(alias="dpsInvoiceId")

    class Config:
        populate_by_name = True


class QuoteCreation(BaseModel):
    """Result of creating a dynamic quote"""

    quote: Quote
    invoice: Invoice


class CreateInvoiceRequest(BaseModel):
    """Create invoice request body"""

    payment_requirements: PaymentRequirements = Field(alias="paymentRequirements")
    negotiated_amount: Union[str, int] = Field(alias="negotiatedAmount")
    ttl_seconds: Optional[int] = Field(None, alias="ttlSeconds")

    class Config:
        populate_by_name = True


class CreateQuoteRequest(BaseModel):
    """Create dynamic quote request body"""

    payment_requirements: PaymentRequirements = Field(alias="paymentRequirements")
    negotiated_amount: Union[str, int] = Field(alias="negotiatedAmount")
    ttl_seconds: Optional[int] = Field(None, alias="ttlSeconds")

    class Config:
        populate_by_name = True


class RequirementsRequest(BaseModel):
    """Body carrying a single payment requirements object"""

    payment_requirements: PaymentRequirements = Field(alias="paymentRequirements")

    class Config:
        populate_by_name = True


class QuoteResponse(BaseModel):
    """Dynamic quote response"""

    quote_id: str = Field(alias="quoteId")
    negotiated_amount: str = Field(alias="negotiatedAmount")
    expires_at: str = Field(alias="expiresAt")
    payment_requirements: dict[str, Any] = Field(alias="paymentRequirements")
    dps_payment_requirements: dict[str, Any] = Field(alias="dpsPaymentRequirements")
    dps_invoice_id: str = Field(alias="dpsInvoiceId")
    dps_invoice_expires_at: str = Field(alias="dpsInvoiceExpiresAt")

    class Config:
        populate_by_name = True
