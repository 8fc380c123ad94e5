"""
Pytest configuration and fixtures
"""

from datetime import datetime, timezone

import pytest

from dps_facilitator.config import DpsConfig
from dps_facilitator.types import PaymentRequirements

START_MS = int(datetime(2024, 1, 1, tzinfo=timezone.utc).timestamp() * 1000)

EVM_PAY_TO = "0xcccccccccccccccccccccccccccccccccccccccc"
SVM_PAY_TO = "Test11111111111111111111111111111111111111111"


class ManualClock:
    """Clock that only moves when told to"""

    def __init__(self, start_ms: int) -> None:
        self.current = start_ms

    def now(self) -> int:
        return self.current

    def advance_ms(self, ms: int) -> None:
        self.current += ms


@pytest.fixture
def clock():
    """Manual clock starting at 2024-01-01T00:00:00Z"""
    return ManualClock(START_MS)


@pytest.fixture
def base_requirements():
    """Seller payment requirements on an EVM network"""
    return PaymentRequirements(
        scheme="exact",
        network="base-sepolia",
        maxAmountRequired="5000",
        resource="https://seller.example/api",
        description="Seller payment",
        mimeType="application/json",
        payTo="0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa",
        maxTimeoutSeconds=120,
        asset="0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb",
    )


@pytest.fixture
def make_config():
    """Factory for DpsConfig with test defaults"""

    def _make(**overrides) -> DpsConfig:
        values = {
            "resource_url": "https://dps.example/payments",
            "description": "DPS Fee",
            "mime_type": "application/json",
            "max_timeout_seconds": 45,
            "fee_basis_points": 200,
            "min_fee_atomic_units": "10",
            "invoice_ttl_seconds": 600,
            "evm_pay_to": EVM_PAY_TO,
            "svm_pay_to": SVM_PAY_TO,
        }
        values.update(overrides)
        return DpsConfig(**values)

    return _make
