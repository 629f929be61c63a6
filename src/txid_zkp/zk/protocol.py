"""
Pedersen commitment proofs over transaction identifiers.

``TxidProofProtocol`` is parameterized by a ``TranscriptDomain``. For every
value it draws a fresh blinding factor, commits, and registers the constraint
``var - value == 0`` in one constraint system shared by all values of the
call; a single proof covers the whole system.

Verification re-commits the published commitments under the same domain and
registers ``var - var`` for each. That constraint is a tautology: a passing
proof shows knowledge of *some* opening of every commitment, not that the
committed value equals any particular transaction hash. Callers that need the
latter must open the commitment out of band.

Usage:
    protocol = TxidProofProtocol(CLASSIC_4LIMB)
    commitments, proof = protocol.prove_checked(raw_txid)
    assert protocol.verify(commitments, proof)
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Sequence
from typing import Any

from txid_zkp.crypto.commitment import Commitment, commitment_bytes
from txid_zkp.crypto.groups import RandomBytes
from txid_zkp.crypto.r1cs import Prover, R1CSError, R1CSProof, Verifier
from txid_zkp.crypto.transcript import Transcript
from txid_zkp.errors import ProofGenerationSelfCheckFailure
from txid_zkp.zk.codec import LIMB_COUNT, decode_tx_hash, to_limb_vector, to_reduced_scalar
from txid_zkp.zk.domains import CLASSIC, CLASSIC_4LIMB, PLUS, TranscriptDomain

logger = logging.getLogger("txid_zkp.protocol")


class TxidProofProtocol:
    """Prove and verify knowledge of commitment openings under one transcript domain."""

    def __init__(
        self,
        domain: TranscriptDomain,
        random_bytes: RandomBytes = secrets.token_bytes,
    ) -> None:
        self.domain = domain
        self._random_bytes = random_bytes

    def encode(self, raw: bytes) -> list[int]:
        """Map 32 identifier bytes to the field elements this domain commits to."""
        if self.domain.limbs == 1:
            return [to_reduced_scalar(raw, self.domain.group.order)]
        if self.domain.limbs == LIMB_COUNT:
            return to_limb_vector(raw)
        raise ValueError(f"Domain {self.domain.name} has unsupported limb count {self.domain.limbs}")

    def prove(self, values: Sequence[int]) -> tuple[list[Commitment], R1CSProof]:
        """
        Commit to every value and prove knowledge of all openings at once.

        Returns:
            (commitments in value order, proof)
        """
        if not values:
            raise ValueError("At least one value is required")

        pc_gens = self.domain.pc_gens
        prover = Prover(pc_gens, Transcript(self.domain.label), self._random_bytes)

        commitments = []
        for value in values:
            blinding, point = pc_gens.fresh_blinding(value, self._random_bytes)
            point, var = prover.commit(value, blinding, point)
            # The verifier never learns value, so this is checked against the witness only.
            prover.constrain(var - value, public=False)
            commitments.append(Commitment.of(point))

        proof = prover.prove(self.domain.gens)
        logger.info(f"Generated {self.domain.name} proof over {len(commitments)} commitment(s)")
        return commitments, proof

    def verify(self, commitments: Sequence[Any], proof: R1CSProof) -> bool:
        """
        Check a proof against commitments under this domain.

        Any cryptographic failure (wrong domain, wrong count, invalid point,
        tampered proof) yields False rather than an exception.
        """
        if not commitments:
            return False

        verifier = Verifier(self.domain.pc_gens, Transcript(self.domain.label))
        try:
            for commitment in commitments:
                var = verifier.commit(commitment_bytes(commitment))
                verifier.constrain(var - var)
            verifier.verify(proof, self.domain.gens)
        except (R1CSError, ValueError) as e:
            logger.debug(f"{self.domain.name} verification failed: {e}")
            return False
        return True

    def prove_txid(self, raw: bytes) -> tuple[list[Commitment], R1CSProof]:
        return self.prove(self.encode(raw))

    def prove_checked(self, raw: bytes) -> tuple[list[Commitment], R1CSProof]:
        """
        Prove, then verify the serialized proof before returning it.

        Raises:
            ProofGenerationSelfCheckFailure: If the fresh proof does not verify.
        """
        commitments, proof = self.prove_txid(raw)
        reparsed = R1CSProof.from_bytes(proof.to_bytes(), self.domain.group)
        if not self.verify(commitments, reparsed):
            logger.error(f"Self-check failed for a fresh {self.domain.name} proof")
            raise ProofGenerationSelfCheckFailure(
                f"Fresh {self.domain.name} proof did not verify against its own commitments"
            )
        return commitments, proof


# ==============================================================================
# Per-variant helpers
# ==============================================================================


def prove_txid_commitment(
    tx_id: int,
    random_bytes: RandomBytes = secrets.token_bytes,
) -> tuple[Commitment, bytes, bool]:
    """
    Classic single-scalar proof of a reduced identifier.

    Returns:
        (commitment, proof bytes, whether the proof verified)
    """
    protocol = TxidProofProtocol(CLASSIC, random_bytes)
    commitments, proof = protocol.prove([tx_id % CLASSIC.group.order])
    verified = protocol.verify(commitments, proof)
    logger.info(f"Classic proof of tx_id verified? {verified}")
    return commitments[0], proof.to_bytes(), verified


def prove_txid_commitment_from_hex(
    txid_hex: str,
    random_bytes: RandomBytes = secrets.token_bytes,
) -> tuple[Commitment, bytes, bool]:
    """Decode a hex transaction hash and run ``prove_txid_commitment`` on it."""
    raw = decode_tx_hash(txid_hex)
    return prove_txid_commitment(to_reduced_scalar(raw, CLASSIC.group.order), random_bytes)


def verify_txid_commitment(commitment: Any, proof_bytes: bytes) -> bool:
    """
    Raises:
        ProofDecodingError: If ``proof_bytes`` is not a well-formed proof.
    """
    proof = R1CSProof.from_bytes(proof_bytes, CLASSIC.group)
    return TxidProofProtocol(CLASSIC).verify([commitment], proof)


def prove_txid_commitment_4limb(
    txid_bytes: bytes,
    random_bytes: RandomBytes = secrets.token_bytes,
) -> tuple[list[Commitment], bytes, bool]:
    """
    Commit to the four little-endian u64 limbs of a 32-byte identifier.

    Returns:
        (4 commitments in limb order, proof bytes, whether the proof verified)
    """
    protocol = TxidProofProtocol(CLASSIC_4LIMB, random_bytes)
    commitments, proof = protocol.prove_txid(txid_bytes)
    proof_bytes = proof.to_bytes()
    verified = protocol.verify(commitments, R1CSProof.from_bytes(proof_bytes, CLASSIC_4LIMB.group))
    return commitments, proof_bytes, verified


def verify_txid_commitment_4limb(commitments: Sequence[Any], proof_bytes: bytes) -> bool:
    proof = R1CSProof.from_bytes(proof_bytes, CLASSIC_4LIMB.group)
    return TxidProofProtocol(CLASSIC_4LIMB).verify(commitments, proof)


def prove_txid_commitment_plus(
    txid_bytes: bytes,
    random_bytes: RandomBytes = secrets.token_bytes,
) -> tuple[list[Commitment], bytes]:
    """Alternate-curve (secp256k1) proof of a reduced identifier."""
    commitments, proof = TxidProofProtocol(PLUS, random_bytes).prove_txid(txid_bytes)
    return commitments, proof.to_bytes()


def verify_txid_commitment_plus(commitments: Sequence[Any], proof_bytes: bytes) -> bool:
    proof = R1CSProof.from_bytes(proof_bytes, PLUS.group)
    return TxidProofProtocol(PLUS).verify(commitments, proof)
