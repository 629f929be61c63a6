"""
txid-zkp: Pedersen commitment proofs over transaction identifiers.

Usage:
    from txid_zkp import TxidProofProtocol, CLASSIC_4LIMB
    commitments, proof = TxidProofProtocol(CLASSIC_4LIMB).prove_checked(raw_txid)
"""

__version__ = "0.1.0"

from txid_zkp.crypto.commitment import Commitment
from txid_zkp.errors import (
    CommitmentDecodingError,
    InputDecodingError,
    ProofDecodingError,
    ProofGenerationSelfCheckFailure,
    TxidProofError,
)
from txid_zkp.zk.domains import CLASSIC, CLASSIC_4LIMB, PLUS, TranscriptDomain
from txid_zkp.zk.protocol import TxidProofProtocol

__all__ = [
    "Commitment",
    "TxidProofProtocol",
    "TranscriptDomain",
    "CLASSIC",
    "CLASSIC_4LIMB",
    "PLUS",
    "TxidProofError",
    "InputDecodingError",
    "CommitmentDecodingError",
    "ProofDecodingError",
    "ProofGenerationSelfCheckFailure",
]
