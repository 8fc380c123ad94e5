"""
FastAPI integration for the DPS facilitator
"""

from dps_facilitator.fastapi.app import create_app

__all__ = ["create_app"]
