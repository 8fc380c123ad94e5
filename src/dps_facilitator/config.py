"""
DPS Facilitator Configuration
Fee settings, payout addresses and network classification
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values
from pydantic import BaseModel, Field

from dps_facilitator.exceptions import InvalidAmountError, InvalidConfigError
from dps_facilitator.fees import parse_atomic, validate_basis_points
from dps_facilitator.utils.address import is_evm_address, is_svm_address

logger = logging.getLogger(__name__)

MAX_INVOICE_TTL_SECONDS = 86400

# SVM network identifiers, x402 v1 names and CAIP-2 ids
SOLANA_MAINNET = "solana"
SOLANA_DEVNET = "solana-devnet"
SOLANA_MAINNET_CAIP2 = "solana:5eykt4UsFv8P8NJdTREpY1vzqKqZKvdp"
SOLANA_DEVNET_CAIP2 = "solana:EtWTRABZaYq6iMfeYKouRu166VRDJjRy"

DEFAULT_SVM_NETWORKS: tuple[str, ...] = (
    SOLANA_MAINNET,
    SOLANA_DEVNET,
    SOLANA_MAINNET_CAIP2,
    SOLANA_DEVNET_CAIP2,
)


class DpsConfig(BaseModel):
    """Facilitator fee and invoice configuration"""

    resource_url: str = Field("https://dps.local/payments", alias="resourceUrl")
    description: str = "Dynamic Pricing Service Fee"
    mime_type: str = Field("application/json", alias="mimeType")
    max_timeout_seconds: int = Field(300, alias="maxTimeoutSeconds")
    fee_basis_points: int = Field(100, alias="feeBasisPoints")
    min_fee_atomic_units: str = Field("1", alias="minFeeAtomicUnits")
    invoice_ttl_seconds: int = Field(900, alias="invoiceTtlSeconds")
    evm_pay_to: Optional[str] = Field(None, alias="evmPayTo")
    svm_pay_to: Optional[str] = Field(None, alias="svmPayTo")
    svm_networks: tuple[str, ...] = Field(DEFAULT_SVM_NETWORKS, alias="svmNetworks")

    class Config:
        populate_by_name = True
        frozen = True


def validate_ttl_seconds(ttl_seconds: int, field_name: str = "invoice_ttl_seconds") -> int:
    """Check ttl is an integer in 1..MAX_INVOICE_TTL_SECONDS"""
    if (
        isinstance(ttl_seconds, bool)
        or not isinstance(ttl_seconds, int)
        or ttl_seconds <= 0
        or ttl_seconds > MAX_INVOICE_TTL_SECONDS
    ):
        raise InvalidConfigError(
            f"{field_name} must be an integer between 1 and {MAX_INVOICE_TTL_SECONDS}, "
            f"got {ttl_seconds!r}"
        )
    return ttl_seconds


def validate_config(config: DpsConfig) -> DpsConfig:
    """
    Validate a configuration before a store is built on it.

    Raises:
        InvalidConfigError: On the first invalid field
    """
    if config.max_timeout_seconds <= 0:
        raise InvalidConfigError(
            f"max_timeout_seconds must be > 0, got {config.max_timeout_seconds}"
        )
    validate_ttl_seconds(config.invoice_ttl_seconds)

    try:
        validate_basis_points(config.fee_basis_points)
        parse_atomic(config.min_fee_atomic_units, "min_fee_atomic_units")
    except InvalidAmountError as e:
        raise InvalidConfigError(str(e)) from e

    if config.evm_pay_to is not None and not is_evm_address(config.evm_pay_to):
        raise InvalidConfigError(f"evm_pay_to is not a valid EVM address: {config.evm_pay_to}")
    if config.svm_pay_to is not None and not is_svm_address(config.svm_pay_to):
        raise InvalidConfigError(f"svm_pay_to is not a valid SVM address: {config.svm_pay_to}")

    return config


def _env_int(values: Mapping[str, Optional[str]], key: str, default: int) -> int:
    raw = values.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError as e:
        raise InvalidConfigError(f"{key} must be an integer, got {raw!r}") from e


def _env_str(values: Mapping[str, Optional[str]], key: str, default: Optional[str]) -> Optional[str]:
    raw = values.get(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


def load_config(
    env_file: Optional[str | Path] = ".env",
    environ: Optional[Mapping[str, str]] = None,
) -> DpsConfig:
    """
    Build a DpsConfig from DPS_* environment variables.

    Args:
        env_file: Optional .env file; process environment wins over its values.
            Pass None to skip file loading.
        environ: Environment mapping, defaults to os.environ

    Returns:
        Validated DpsConfig

    Raises:
        InvalidConfigError: If a value is malformed
    """
    values: dict[str, Optional[str]] = {}
    if env_file is not None and Path(env_file).is_file():
        values.update(dotenv_values(env_file))
        logger.debug(f"Loaded DPS settings from {env_file}")
    values.update(environ if environ is not None else os.environ)

    svm_networks_raw = _env_str(values, "DPS_SVM_NETWORKS", None)
    svm_networks = (
        tuple(n.strip() for n in svm_networks_raw.split(",") if n.strip())
        if svm_networks_raw is not None
        else DEFAULT_SVM_NETWORKS
    )

    config = DpsConfig(
        resource_url=_env_str(values, "DPS_PAYMENT_RESOURCE", "https://dps.local/payments"),
        description=_env_str(values, "DPS_PAYMENT_DESCRIPTION", "Dynamic Pricing Service Fee"),
        mime_type=_env_str(values, "DPS_PAYMENT_MIME_TYPE", "application/json"),
        max_timeout_seconds=_env_int(values, "DPS_PAYMENT_TIMEOUT_SECONDS", 300),
        fee_basis_points=_env_int(values, "DPS_FEE_BPS", 100),
        min_fee_atomic_units=_env_str(values, "DPS_MIN_FEE_ATOMIC", "1"),
        invoice_ttl_seconds=_env_int(values, "DPS_INVOICE_TTL_SECONDS", 900),
        evm_pay_to=_env_str(values, "DPS_EVM_PAY_TO", None),
        svm_pay_to=_env_str(values, "DPS_SVM_PAY_TO", None),
        svm_networks=svm_networks,
    )
    return validate_config(config)
