"""
DPS Utility Functions
"""

from dps_facilitator.utils.address import is_evm_address, is_svm_address
from dps_facilitator.utils.ids import generate_invoice_id, generate_quote_id

__all__ = [
    "is_evm_address",
    "is_svm_address",
    "generate_invoice_id",
    "generate_quote_id",
]
