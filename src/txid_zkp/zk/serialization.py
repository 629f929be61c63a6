"""
Hex wire format for commitments and proofs.

Decoding is pure: the same input always yields the same value or the same
error, and nothing is cached between calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from txid_zkp.crypto.commitment import Commitment, commitment_bytes
from txid_zkp.crypto.groups import POINT_SIZE, Group
from txid_zkp.crypto.r1cs import R1CSProof
from txid_zkp.errors import CommitmentDecodingError, InputDecodingError, ProofDecodingError
from txid_zkp.zk.codec import decode_hex


def encode_bundle(commitments: Iterable[Any], proof: R1CSProof | bytes) -> dict[str, Any]:
    """Render commitments and proof as ``{"commitments": [hex, ...], "proof": hex}``."""
    proof_bytes = proof.to_bytes() if isinstance(proof, R1CSProof) else bytes(proof)
    return {
        "commitments": [commitment_bytes(c).hex() for c in commitments],
        "proof": proof_bytes.hex(),
    }


def decode_commitment(value: str, public_message: str | None = None) -> Commitment:
    """
    Decode one hex commitment of exactly 32 bytes.

    The bytes are not checked to be a curve point here; an invalid point
    simply fails verification.

    Raises:
        CommitmentDecodingError: On invalid hex or a length other than 32 bytes.
    """
    try:
        raw = decode_hex(value)
    except InputDecodingError as e:
        raise CommitmentDecodingError(str(e), public_message=public_message) from e
    if len(raw) != POINT_SIZE:
        raise CommitmentDecodingError(
            f"Commitment must be {POINT_SIZE} bytes, got {len(raw)}",
            public_message=public_message,
        )
    return Commitment(raw)


def decode_commitments(values: Sequence[str]) -> list[Commitment]:
    """Decode a list of hex commitments; any bad entry rejects the whole list."""
    return [decode_commitment(v, public_message="bad commitments") for v in values]


def decode_proof(value: str, group: Group) -> R1CSProof:
    """
    Raises:
        ProofDecodingError: On invalid hex or bytes that do not parse as a proof.
    """
    try:
        raw = decode_hex(value)
    except InputDecodingError as e:
        raise ProofDecodingError(str(e)) from e
    return R1CSProof.from_bytes(raw, group)
