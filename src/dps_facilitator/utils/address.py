"""
Address format checks for the EVM and SVM payout addresses
"""

import logging

import base58

logger = logging.getLogger(__name__)

_HEX_DIGITS = "0123456789abcdefABCDEF"


def is_evm_address(address: str) -> bool:
    """Check for an EVM hex address (0x + 40 hex chars)

    Checksum casing is not enforced.
    """
    if not address.startswith("0x") or len(address) != 42:
        return False
    return all(c in _HEX_DIGITS for c in address[2:])


def is_svm_address(address: str) -> bool:
    """Check that an SVM address is valid Base58

    Args:
        address: Address in Base58 format

    Returns:
        True if the address decodes to a non-empty byte string
    """
    if not address:
        return False
    try:
        decoded = base58.b58decode(address)
    except ValueError as e:
        logger.debug(f"Rejecting SVM address {address}: {e}")
        return False
    return len(decoded) > 0
