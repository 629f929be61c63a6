"""
txid_zkp.crypto — Curve adapters and the constraint-system proof library.

Provides:
- Ed25519 (PyNaCl) and secp256k1 (ecdsa) groups behind one interface
- Pedersen generators with a nothing-up-my-sleeve H
- A 32-byte Commitment view over every point representation
- Fiat–Shamir transcripts
- Constraint-system provers and verifiers over committed values
"""

from txid_zkp.crypto.commitment import Commitment, commitment_bytes
from txid_zkp.crypto.groups import (
    ED25519,
    GROUPS,
    SECP256K1,
    EdwardsPoint,
    Group,
)
from txid_zkp.crypto.pedersen import PedersenGens
from txid_zkp.crypto.r1cs import (
    ONE,
    ConstraintProof,
    LinearCombination,
    ProofGens,
    Prover,
    R1CSError,
    R1CSProof,
    Variable,
    Verifier,
)
from txid_zkp.crypto.transcript import Transcript

__all__ = [
    # Groups
    "ED25519",
    "SECP256K1",
    "GROUPS",
    "EdwardsPoint",
    "Group",
    # Commitments
    "Commitment",
    "commitment_bytes",
    "PedersenGens",
    # Constraint systems
    "ONE",
    "ConstraintProof",
    "LinearCombination",
    "ProofGens",
    "Prover",
    "R1CSError",
    "R1CSProof",
    "Transcript",
    "Variable",
    "Verifier",
]
