"""
Additional constraint systems over committed values.

Unlike the identifier proofs, the verifier here registers the same
non-trivial constraint as the prover, so the proof carries a constraint entry
that ties the public relation to the commitments.

- ``prove_sum`` commits to x, y and z = x + y under independent blindings
  and proves ``x + y - z == 0``.
- ``prove_equal`` commits to a secret value and proves that it equals a
  public literal, ``v - expected == 0``.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from txid_zkp.crypto.commitment import Commitment
from txid_zkp.crypto.groups import ED25519, RandomBytes
from txid_zkp.crypto.pedersen import PedersenGens
from txid_zkp.crypto.r1cs import ProofGens, Prover, R1CSError, R1CSProof, Verifier
from txid_zkp.crypto.transcript import Transcript

logger = logging.getLogger("txid_zkp.circuits")

SUM_LABEL = b"SumProof"
SUM_GENS = ProofGens(bit_width=64, party_capacity=3)

EQUAL_LABEL = b"ZKPDemo"
EQUAL_GENS = ProofGens(bit_width=64, party_capacity=1)


# ==============================================================================
# x + y = z
# ==============================================================================


@dataclass(frozen=True)
class SumProof:
    """Commitments to (x, y, z) and a proof that x + y = z."""
    commitments: tuple[Commitment, Commitment, Commitment]
    proof: R1CSProof


def prove_sum(x: int, y: int, random_bytes: RandomBytes = secrets.token_bytes) -> SumProof:
    pc_gens = PedersenGens.default(ED25519)
    prover = Prover(pc_gens, Transcript(SUM_LABEL), random_bytes)

    variables = []
    commitments = []
    for value in (x, y, x + y):
        blinding, point = pc_gens.fresh_blinding(value, random_bytes)
        point, var = prover.commit(value, blinding, point)
        variables.append(var)
        commitments.append(Commitment.of(point))
    var_x, var_y, var_z = variables
    prover.constrain(var_x + var_y - var_z)

    proof = prover.prove(SUM_GENS)
    return SumProof(commitments=tuple(commitments), proof=proof)


def verify_sum(sum_proof: SumProof) -> bool:
    verifier = Verifier(PedersenGens.default(ED25519), Transcript(SUM_LABEL))
    var_x, var_y, var_z = (verifier.commit(c.data) for c in sum_proof.commitments)
    verifier.constrain(var_x + var_y - var_z)
    try:
        verifier.verify(sum_proof.proof, SUM_GENS)
    except R1CSError as e:
        logger.debug(f"Sum proof rejected: {e}")
        return False
    return True


# ==============================================================================
# v = expected
# ==============================================================================


@dataclass(frozen=True)
class EqualityProof:
    """A commitment to v and a proof that v equals a public value."""
    commitment: Commitment
    proof: R1CSProof


def prove_equal(
    value: int,
    expected: int,
    random_bytes: RandomBytes = secrets.token_bytes,
) -> EqualityProof:
    """
    Commit to ``value`` and prove that it equals ``expected``.

    Raises:
        R1CSError: If ``value != expected``.
    """
    pc_gens = PedersenGens.default(ED25519)
    prover = Prover(pc_gens, Transcript(EQUAL_LABEL), random_bytes)
    blinding, point = pc_gens.fresh_blinding(value, random_bytes)
    point, var = prover.commit(value, blinding, point)
    prover.constrain(var - expected)
    return EqualityProof(commitment=Commitment.of(point), proof=prover.prove(EQUAL_GENS))


def verify_equal(equality_proof: EqualityProof, expected: int) -> bool:
    verifier = Verifier(PedersenGens.default(ED25519), Transcript(EQUAL_LABEL))
    var = verifier.commit(equality_proof.commitment.data)
    verifier.constrain(var - expected)
    try:
        verifier.verify(equality_proof.proof, EQUAL_GENS)
    except R1CSError as e:
        logger.debug(f"Equality proof rejected: {e}")
        return False
    return True
