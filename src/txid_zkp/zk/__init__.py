"""
txid_zkp.zk — Transaction identifier proofs.

Provides:
- Hex / scalar / limb codec for transaction hashes
- Transcript domains for the classic, 4-limb and plus variants
- TxidProofProtocol: prove and verify under one domain
- Hex serialization of commitments and proofs
- Committed x + y = z and v = expected circuits
"""

from txid_zkp.zk.circuits import (
    EqualityProof,
    SumProof,
    prove_equal,
    prove_sum,
    verify_equal,
    verify_sum,
)
from txid_zkp.zk.codec import decode_hex, decode_tx_hash, to_limb_vector, to_reduced_scalar
from txid_zkp.zk.domains import CLASSIC, CLASSIC_4LIMB, DOMAINS, PLUS, TranscriptDomain, get_domain
from txid_zkp.zk.protocol import (
    TxidProofProtocol,
    prove_txid_commitment,
    prove_txid_commitment_4limb,
    prove_txid_commitment_from_hex,
    prove_txid_commitment_plus,
    verify_txid_commitment,
    verify_txid_commitment_4limb,
    verify_txid_commitment_plus,
)
from txid_zkp.zk.serialization import (
    decode_commitment,
    decode_commitments,
    decode_proof,
    encode_bundle,
)

__all__ = [
    # Codec
    "decode_hex",
    "decode_tx_hash",
    "to_limb_vector",
    "to_reduced_scalar",
    # Domains
    "CLASSIC",
    "CLASSIC_4LIMB",
    "PLUS",
    "DOMAINS",
    "TranscriptDomain",
    "get_domain",
    # Protocol
    "TxidProofProtocol",
    "prove_txid_commitment",
    "prove_txid_commitment_from_hex",
    "prove_txid_commitment_4limb",
    "verify_txid_commitment",
    "verify_txid_commitment_4limb",
    "prove_txid_commitment_plus",
    "verify_txid_commitment_plus",
    # Serialization
    "encode_bundle",
    "decode_commitment",
    "decode_commitments",
    "decode_proof",
    # Circuits
    "SumProof",
    "prove_sum",
    "verify_sum",
    "EqualityProof",
    "prove_equal",
    "verify_equal",
]
