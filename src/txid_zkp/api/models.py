from pydantic import BaseModel, Field


class TxHashRequest(BaseModel):
    """Request model for the proof-generation routes."""

    tx_hash: str = Field(..., description="Transaction hash (hex, optional 0x prefix, at least 32 bytes)")


class ProofResponse(BaseModel):
    """Commitments and the proof covering them."""

    commitments: list[str] = Field(..., description="Hex-encoded 32-byte commitments, in value order")
    proof: str = Field(..., description="Hex-encoded proof")


class VerifyRequest(BaseModel):
    """Request model for verifying a single-commitment classic proof."""

    commitment: str = Field(..., description="Hex-encoded 32-byte commitment")
    proof: str = Field(..., description="Hex-encoded proof")


class VerifyManyRequest(BaseModel):
    """Request model for verifying a multi-commitment proof."""

    commitments: list[str] = Field(..., description="Hex-encoded 32-byte commitments, in value order")
    proof: str = Field(..., description="Hex-encoded proof")


class VerifyResponse(BaseModel):
    """Verification outcome. A well-formed but invalid proof yields false, not an error."""

    verified: bool = Field(..., description="Whether the proof verified against the commitments")
