"""
Fee calculation in atomic units.

All arithmetic is done on Python ints parsed from decimal strings, so results
are exact for any amount size.
"""

import re

from dps_facilitator.exceptions import InvalidAmountError

BASIS_POINTS_DENOMINATOR = 10_000

_ATOMIC_VALUE_PATTERN = re.compile(r"[0-9]+")


def parse_atomic(value: str, field_name: str = "amount") -> int:
    """Parse a non-negative decimal-integer string

    Args:
        value: Atomic amount, e.g. "1000000"
        field_name: Name used in the error message

    Returns:
        Parsed integer

    Raises:
        InvalidAmountError: If value is not a string of ASCII digits
    """
    if not isinstance(value, str) or not _ATOMIC_VALUE_PATTERN.fullmatch(value):
        raise InvalidAmountError(f"{field_name} must be a non-negative integer string, got {value!r}")
    return int(value)


def validate_basis_points(fee_basis_points: int) -> int:
    """Reject non-integer and negative basis points"""
    if isinstance(fee_basis_points, bool) or not isinstance(fee_basis_points, int):
        raise InvalidAmountError(f"fee_basis_points must be an integer, got {fee_basis_points!r}")
    if fee_basis_points < 0:
        raise InvalidAmountError(f"fee_basis_points must be >= 0, got {fee_basis_points}")
    return fee_basis_points


def compute_fee(negotiated_amount: str, fee_basis_points: int, min_fee_atomic_units: str) -> str:
    """
    Compute the facilitator fee for a negotiated amount.

    fee = max(floor(amount * bps / 10000), min_fee)

    Args:
        negotiated_amount: Amount agreed between buyer and seller, atomic units
        fee_basis_points: Fee rate, 1 bp = 0.01%
        min_fee_atomic_units: Lower bound for the fee, atomic units

    Returns:
        Fee as a decimal-integer string

    Raises:
        InvalidAmountError: On malformed or negative input
    """
    amount = parse_atomic(negotiated_amount, "negotiated_amount")
    bps = validate_basis_points(fee_basis_points)
    min_fee = parse_atomic(min_fee_atomic_units, "min_fee_atomic_units")

    fee = (amount * bps) // BASIS_POINTS_DENOMINATOR
    return str(max(fee, min_fee))
