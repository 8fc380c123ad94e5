"""
Links facilitator fee requirements to their invoice through ``extra``
"""

from typing import Any, Iterable, Optional

from dps_facilitator.exceptions import InvalidConfigError, MissingInvoiceIdError
from dps_facilitator.types import DPS_INVOICE_ID_KEY, DYNAMIC_QUOTE_ID_KEY, PaymentRequirements


def resolve_pay_to(
    network: str,
    *,
    evm_pay_to: Optional[str],
    svm_pay_to: Optional[str],
    svm_networks: Iterable[str],
) -> str:
    """
    Select the payout address for a network family.

    Networks in ``svm_networks`` pay out to ``svm_pay_to``; every other
    network is treated as EVM.

    Raises:
        InvalidConfigError: If the selected family has no payout address
    """
    if network in set(svm_networks):
        if not svm_pay_to:
            raise InvalidConfigError("DPS SVM payTo address is not configured")
        return svm_pay_to

    if not evm_pay_to:
        raise InvalidConfigError("DPS EVM payTo address is not configured")
    return evm_pay_to


def link_requirements(
    invoice_id: str,
    template: PaymentRequirements,
    *,
    amount: str,
    pay_to: str,
    resource: str,
    description: str,
    mime_type: str,
    max_timeout_seconds: int,
) -> PaymentRequirements:
    """
    Build facilitator fee requirements from a seller template.

    The result is a copy of ``template`` paying ``amount`` to ``pay_to`` for
    the facilitator's own resource, with ``extra.dpsInvoiceId`` set. Other
    ``extra`` keys survive; the template is not modified.
    """
    update: dict[str, Any] = {
        "pay_to": pay_to,
        "resource": resource,
        "description": description,
        "mime_type": mime_type,
        "max_timeout_seconds": max_timeout_seconds,
        "extra": {**(template.extra or {}), DPS_INVOICE_ID_KEY: invoice_id},
    }

    # Keep the template's amount spelling (v1 maxAmountRequired / v2 amount)
    if template.amount is not None:
        update["amount"] = amount
    if template.max_amount_required is not None or template.amount is None:
        update["max_amount_required"] = amount

    return template.model_copy(update=update)


def extract_invoice_id(requirements: PaymentRequirements) -> str:
    """
    Read the invoice id tagged onto a requirements object.

    Raises:
        MissingInvoiceIdError: If ``extra.dpsInvoiceId`` is absent or not a
            non-empty string
    """
    invoice_id = (requirements.extra or {}).get(DPS_INVOICE_ID_KEY)
    if not isinstance(invoice_id, str) or not invoice_id:
        raise MissingInvoiceIdError()
    return invoice_id


def extract_quote_id(requirements: PaymentRequirements) -> Optional[str]:
    """Read ``extra.dynamicQuoteId``, None when absent"""
    quote_id = (requirements.extra or {}).get(DYNAMIC_QUOTE_ID_KEY)
    if isinstance(quote_id, str) and quote_id:
        return quote_id
    return None


def has_invoice_id(requirements: PaymentRequirements) -> bool:
    """True when requirements are tagged with a DPS invoice id"""
    return bool((requirements.extra or {}).get(DPS_INVOICE_ID_KEY))
