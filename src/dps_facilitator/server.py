"""
DPS Facilitator Main Entry Point
Starts a FastAPI server for DPS invoices and dynamic quotes.
"""

import os

import uvicorn

from dps_facilitator.config import load_config
from dps_facilitator.facilitator import DpsFacilitator
from dps_facilitator.fastapi import create_app
from dps_facilitator.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> None:
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))

    config = load_config()
    if not config.evm_pay_to and not config.svm_pay_to:
        raise SystemExit("DPS_EVM_PAY_TO or DPS_SVM_PAY_TO must be set")

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))

    app = create_app(DpsFacilitator(config))

    logger.info("DPS facilitator initialized:")
    logger.info(f"  EVM payTo: {config.evm_pay_to}")
    logger.info(f"  SVM payTo: {config.svm_pay_to}")
    logger.info(f"  Fee: {config.fee_basis_points} bps, min {config.min_fee_atomic_units}")
    logger.info(f"  Invoice TTL: {config.invoice_ttl_seconds}s")
    logger.info(f"Listening at http://{host}:{port}")

    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
