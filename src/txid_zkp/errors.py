"""
Error taxonomy for the txid proof service.

Every error raised at the codec / serialization boundary carries the HTTP
status and the public message the API returns as ``{"error": message}``.
Cryptographic mismatch is deliberately absent: ``verify`` answers ``False``.
"""

from __future__ import annotations


class TxidProofError(ValueError):
    """Base class for input and proof-pipeline errors."""

    status_code: int = 400
    public_message: str = "bad request"

    def __init__(self, message: str | None = None, public_message: str | None = None) -> None:
        super().__init__(message or public_message or self.public_message)
        if public_message is not None:
            self.public_message = public_message


class InputDecodingError(TxidProofError):
    """Raised when a transaction identifier is not valid hex or is shorter than 32 bytes."""

    public_message = "invalid tx_hash"


class CommitmentDecodingError(TxidProofError):
    """Raised when a commitment is not exactly 32 hex-encoded bytes."""

    public_message = "bad commitment"


class ProofDecodingError(TxidProofError):
    """Raised when proof bytes cannot be parsed into a structured proof."""

    public_message = "bad proof"


class ProofGenerationSelfCheckFailure(TxidProofError):
    """Raised when a freshly generated proof does not verify against its own commitments."""

    status_code = 500
    public_message = "proof failed"
