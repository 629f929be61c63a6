"""
txid_zkp.api — FastAPI service exposing proof generation and verification.
"""

from txid_zkp.api.server import app, create_app

__all__ = ["app", "create_app"]
