"""
Constraint-system proofs over Pedersen-committed values.

A ``Prover`` commits to secret values, registers linear constraints over the
committed variables, and produces one ``R1CSProof`` for the whole system. A
``Verifier`` re-commits the published commitments into a fresh system over a
transcript with the same domain label, registers its own constraints, and
checks the proof.

Protocol (one Fiat–Shamir challenge shared by all k commitments and all q
public constraints):

    statement:  V_i = r_i·G + v_i·H                         for i in [k]
                Σ_i c_ji·v_i + c_j0 = 0                     for j in [q]
    prover:     A_i = b_i·G + a_i·H       (a_i, b_i fresh nonces)
                R_j = w_j·G               (w_j fresh nonce)
    challenge:  e = H(domain, "r1cs v1", V_1..V_k, gens, k, q, A_1..A_k, R_1..R_q)
    responses:  s_i = a_i + e·v_i,  t_i = b_i + e·r_i
                z_j = w_j + e·ρ_j,  ρ_j = Σ_i c_ji·r_i
    verifier:   t_i·G + s_i·H == A_i + e·V_i
                z_j·G == R_j + e·P_j,  P_j = Σ_i c_ji·V_i + c_j0·H

When constraint j holds, the value terms of P_j cancel and P_j = ρ_j·G, so
the second check is a Schnorr proof that P_j has no H component. The proof
is bound to the domain label, the generator parameters and the exact ordered
list of commitments.

Constraints:
    - Every prover constraint is evaluated over the witness values; proving a
      system whose assignment violates one raises ``R1CSError``.
    - Public prover constraints (the default) each get a Schnorr entry. The
      verifier must register the same constraints in the same order; each of
      its non-tautological constraints is checked against the next entry.
    - Private prover constraints (``public=False``) are only checked against
      the witness. Use them for literals the verifier must not learn: an entry
      would reveal c_j0·H.
    - Tautologies such as ``var - var`` get no entry on either side and
      constrain nothing.

Wire format::

    k (u32 LE) || q (u32 LE)
    || k × (A_i (32) || s_i (32) || t_i (32))
    || q × (R_j (32) || z_j (32))

References:
    [Oka92] T. Okamoto, "Provably Secure and Practical Identification Schemes
            and Corresponding Signature Schemes", CRYPTO '92.
    [Sch91] C. P. Schnorr, "Efficient Signature Generation by Smart Cards",
            Journal of Cryptology, 1991.
    [FS86]  A. Fiat, A. Shamir, "How To Prove Yourself", CRYPTO '86.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from txid_zkp.crypto.groups import POINT_SIZE, SCALAR_SIZE, Group, RandomBytes
from txid_zkp.crypto.pedersen import PedersenGens
from txid_zkp.crypto.transcript import Transcript
from txid_zkp.errors import ProofDecodingError

logger = logging.getLogger("txid_zkp.r1cs")

COUNT_SIZE = 4
PROOF_HEADER_SIZE = 2 * COUNT_SIZE
"""Bytes of the opening and constraint counts that prefix a serialized proof."""

OPENING_ENTRY_SIZE = POINT_SIZE + 2 * SCALAR_SIZE
"""Bytes per committed variable in a serialized proof."""

CONSTRAINT_ENTRY_SIZE = POINT_SIZE + SCALAR_SIZE
"""Bytes per public constraint in a serialized proof."""


class R1CSError(Exception):
    """Raised when a constraint system cannot be proven or a proof fails to verify."""
    pass


# ==============================================================================
# Generator parameters
# ==============================================================================


@dataclass(frozen=True)
class ProofGens:
    """
    Generator parameters shared by prover and verifier.

    Attributes:
        bit_width: Width in bits of each committed value's slot (64 for every variant).
        party_capacity: Maximum number of committed values in one proof.
    """
    bit_width: int = 64
    party_capacity: int = 1

    def __post_init__(self) -> None:
        if self.bit_width <= 0:
            raise ValueError(f"bit_width must be positive, got {self.bit_width}")
        if self.party_capacity <= 0:
            raise ValueError(f"party_capacity must be positive, got {self.party_capacity}")


# ==============================================================================
# Variables and linear combinations
# ==============================================================================


@dataclass(frozen=True)
class Variable:
    """A committed variable, or the constant ``ONE``."""
    kind: str
    index: int = 0

    def __add__(self, other: Operand) -> LinearCombination:
        return LinearCombination.of(self) + other

    def __radd__(self, other: Operand) -> LinearCombination:
        return LinearCombination.of(other) + self

    def __sub__(self, other: Operand) -> LinearCombination:
        return LinearCombination.of(self) - other

    def __rsub__(self, other: Operand) -> LinearCombination:
        return LinearCombination.of(other) - self

    def __neg__(self) -> LinearCombination:
        return -LinearCombination.of(self)

    def __mul__(self, k: int) -> LinearCombination:
        return LinearCombination.of(self) * k

    __rmul__ = __mul__


ONE = Variable("one")


@dataclass(frozen=True)
class LinearCombination:
    """Σ c_j·x_j over variables; coefficients are reduced only on ``simplify``."""
    terms: tuple[tuple[Variable, int], ...] = ()

    @classmethod
    def of(cls, x: Operand) -> LinearCombination:
        if isinstance(x, LinearCombination):
            return x
        if isinstance(x, Variable):
            return cls(((x, 1),))
        if isinstance(x, int):
            return cls(((ONE, x),))
        raise TypeError(f"Cannot build a linear combination from {type(x).__name__}")

    def __add__(self, other: Operand) -> LinearCombination:
        return LinearCombination(self.terms + LinearCombination.of(other).terms)

    __radd__ = __add__

    def __sub__(self, other: Operand) -> LinearCombination:
        return self + (-LinearCombination.of(other))

    def __rsub__(self, other: Operand) -> LinearCombination:
        return LinearCombination.of(other) - self

    def __neg__(self) -> LinearCombination:
        return LinearCombination(tuple((v, -c) for v, c in self.terms))

    def __mul__(self, k: int) -> LinearCombination:
        return LinearCombination(tuple((v, c * k) for v, c in self.terms))

    __rmul__ = __mul__

    def simplify(self, order: int) -> dict[Variable, int]:
        """Merge terms per variable modulo ``order`` and drop zero coefficients."""
        coeffs: dict[Variable, int] = {}
        for var, c in self.terms:
            coeffs[var] = (coeffs.get(var, 0) + c) % order
        return {var: c for var, c in coeffs.items() if c}

    def is_tautology(self, order: int) -> bool:
        return not self.simplify(order)


Operand = Union[Variable, LinearCombination, int]



# ==============================================================================
# Proof object
# ==============================================================================


@dataclass(frozen=True)
class OpeningProof:
    """Per-commitment part of a proof: nonce point A and responses s (value), t (blinding)."""
    A: bytes
    s: int
    t: int


@dataclass(frozen=True)
class ConstraintProof:
    """Per-constraint part of a proof: nonce point R and response z."""
    R: bytes
    z: int


@dataclass(frozen=True)
class R1CSProof:
    """A proof over one constraint system, tied to the group it was produced in."""
    group: Group = field(repr=False)
    openings: tuple[OpeningProof, ...]
    constraints: tuple[ConstraintProof, ...] = ()

    def to_bytes(self) -> bytes:
        out = bytearray()
        out += len(self.openings).to_bytes(COUNT_SIZE, "little")
        out += len(self.constraints).to_bytes(COUNT_SIZE, "little")
        for opening in self.openings:
            out += opening.A
            out += self.group.encode_scalar(opening.s)
            out += self.group.encode_scalar(opening.t)
        for constraint in self.constraints:
            out += constraint.R
            out += self.group.encode_scalar(constraint.z)
        return bytes(out)

    @classmethod
    def from_bytes(cls, data: bytes, group: Group) -> R1CSProof:
        """
        Parse a serialized proof.

        Points are kept as raw bytes and only validated during verification;
        scalars must be canonically reduced.

        Raises:
            ProofDecodingError: On a bad header, a length that does not match
                it, or a non-canonical scalar.
        """
        data = bytes(data)
        if len(data) < PROOF_HEADER_SIZE:
            raise ProofDecodingError(f"Proof length {len(data)} is shorter than its header")
        count = int.from_bytes(data[:COUNT_SIZE], "little")
        constraint_count = int.from_bytes(data[COUNT_SIZE:PROOF_HEADER_SIZE], "little")
        if not count:
            raise ProofDecodingError("Proof covers no commitments")
        expected = (
            PROOF_HEADER_SIZE
            + count * OPENING_ENTRY_SIZE
            + constraint_count * CONSTRAINT_ENTRY_SIZE
        )
        if len(data) != expected:
            raise ProofDecodingError(
                f"Proof length {len(data)} does not match {count} openings "
                f"and {constraint_count} constraints ({expected} bytes)"
            )

        def scalar_at(offset: int) -> int:
            try:
                return group.decode_scalar(data[offset:offset + SCALAR_SIZE])
            except ValueError as e:
                raise ProofDecodingError(f"Malformed proof scalar at offset {offset}: {e}") from e

        openings = []
        offset = PROOF_HEADER_SIZE
        for _ in range(count):
            a_end = offset + POINT_SIZE
            openings.append(OpeningProof(
                A=data[offset:a_end],
                s=scalar_at(a_end),
                t=scalar_at(a_end + SCALAR_SIZE),
            ))
            offset += OPENING_ENTRY_SIZE
        constraints = []
        for _ in range(constraint_count):
            r_end = offset + POINT_SIZE
            constraints.append(ConstraintProof(R=data[offset:r_end], z=scalar_at(r_end)))
            offset += CONSTRAINT_ENTRY_SIZE
        return cls(group=group, openings=tuple(openings), constraints=tuple(constraints))


def _bind_statement(transcript: Transcript, gens: ProofGens, count: int, constraints: int) -> None:
    transcript.append_u64(b"n", gens.bit_width)
    transcript.append_u64(b"m", gens.party_capacity)
    transcript.append_u64(b"k", count)
    transcript.append_u64(b"q", constraints)


# ==============================================================================
# Prover
# ==============================================================================


class Prover:
    """
    Builds a constraint system over committed values and proves it.

    Usage:
        prover = Prover(pc_gens, Transcript(b"MyDomain"), secrets.token_bytes)
        V, var = prover.commit(value, blinding)
        prover.constrain(var - 42)
        proof = prover.prove(ProofGens(64, 1))
    """

    def __init__(
        self,
        pc_gens: PedersenGens,
        transcript: Transcript,
        random_bytes: RandomBytes,
    ) -> None:
        self.pc_gens = pc_gens
        self.transcript = transcript
        self._random_bytes = random_bytes
        self._values: list[int] = []
        self._blindings: list[int] = []
        self._constraints: list[tuple[LinearCombination, bool]] = []
        transcript.append_message(b"dom-sep", b"r1cs v1")

    def commit(
        self,
        value: int,
        blinding: int,
        point: Optional[Any] = None,
    ) -> tuple[Any, Variable]:
        """
        Commit to ``value`` under ``blinding`` and allocate a variable for it.

        Args:
            value: Secret value.
            blinding: Blinding scalar.
            point: ``blinding·G + value·H`` if the caller already has it,
                e.g. from ``PedersenGens.fresh_blinding``. It is not recomputed.

        Raises:
            ValueError: If the commitment point has no 32-byte encoding.
        """
        group = self.pc_gens.group
        if point is None:
            point = self.pc_gens.commit(value, blinding)
        self.transcript.append_message(b"V", group.encode(point))
        self._values.append(value % group.order)
        self._blindings.append(blinding % group.order)
        return point, Variable("committed", len(self._values) - 1)

    def constrain(self, lc: Operand, public: bool = True) -> None:
        """
        Require ``lc == 0`` over the witness.

        A public constraint is proven to the verifier, which must register
        the same constraint at the same position. A private one is only
        checked against the assignment.
        """
        self._constraints.append((LinearCombination.of(lc), public))

    def _evaluate(self, lc: LinearCombination) -> int:
        group = self.pc_gens.group
        total = 0
        for var, c in lc.simplify(group.order).items():
            total += c * (1 if var == ONE else self._values[var.index])
        return total % group.order

    def _blinding_of(self, terms: dict[Variable, int]) -> int:
        group = self.pc_gens.group
        total = sum(c * self._blindings[var.index] for var, c in terms.items() if var != ONE)
        return total % group.order

    def _opening_nonce(self) -> tuple[Any, int, int]:
        group = self.pc_gens.group
        while True:
            a = group.random_scalar(self._random_bytes)
            b = group.random_scalar(self._random_bytes)
            A = self.pc_gens.commit(a, b)
            if not group.is_encodable(A):
                # -A is encodable whenever A has an odd y.
                a, b = group.neg_scalar(a), group.neg_scalar(b)
                A = self.pc_gens.commit(a, b)
            if group.is_encodable(A):
                return A, a, b

    def _constraint_nonce(self) -> tuple[Any, int]:
        group = self.pc_gens.group
        while True:
            w = group.random_scalar(self._random_bytes)
            R = group.mul(w, self.pc_gens.G)
            if not group.is_encodable(R):
                w = group.neg_scalar(w)
                R = group.mul(w, self.pc_gens.G)
            if group.is_encodable(R):
                return R, w

    def prove(self, gens: ProofGens) -> R1CSProof:
        group = self.pc_gens.group
        count = len(self._values)
        if count > gens.party_capacity:
            raise R1CSError(
                f"{count} committed values exceed generator capacity {gens.party_capacity}"
            )
        for q, (lc, _) in enumerate(self._constraints):
            if self._evaluate(lc):
                raise R1CSError(f"Constraint {q} is not satisfied by the assignment")

        public = [lc.simplify(group.order) for lc, is_public in self._constraints if is_public]
        public = [terms for terms in public if terms]

        _bind_statement(self.transcript, gens, count, len(public))

        nonces = [self._opening_nonce() for _ in range(count)]
        for A, _, _ in nonces:
            self.transcript.append_message(b"A", group.encode(A))
        constraint_nonces = [self._constraint_nonce() for _ in public]
        for R, _ in constraint_nonces:
            self.transcript.append_message(b"R", group.encode(R))

        e = self.transcript.challenge_scalar(b"e", group.order)

        openings = tuple(
            OpeningProof(
                A=group.encode(A),
                s=(a + e * v) % group.order,
                t=(b + e * r) % group.order,
            )
            for (A, a, b), v, r in zip(nonces, self._values, self._blindings, strict=True)
        )
        constraints = tuple(
            ConstraintProof(
                R=group.encode(R),
                z=(w + e * self._blinding_of(terms)) % group.order,
            )
            for (R, w), terms in zip(constraint_nonces, public, strict=True)
        )
        logger.debug(
            f"Proved {count} openings under {len(self._constraints)} constraints "
            f"({len(constraints)} public)"
        )
        return R1CSProof(group=group, openings=openings, constraints=constraints)


# ==============================================================================
# Verifier
# ==============================================================================


class Verifier:
    """
    Re-commits published commitments and checks a proof against them.

    Usage:
        verifier = Verifier(pc_gens, Transcript(b"MyDomain"))
        var = verifier.commit(commitment_bytes)
        verifier.constrain(var - 42)
        verifier.verify(proof, ProofGens(64, 1))   # raises R1CSError
    """

    def __init__(self, pc_gens: PedersenGens, transcript: Transcript) -> None:
        self.pc_gens = pc_gens
        self.transcript = transcript
        self._commitments: list[bytes] = []
        self._constraints: list[LinearCombination] = []
        transcript.append_message(b"dom-sep", b"r1cs v1")

    def commit(self, commitment: bytes) -> Variable:
        commitment = bytes(commitment)
        self.transcript.append_message(b"V", commitment)
        self._commitments.append(commitment)
        return Variable("committed", len(self._commitments) - 1)

    def constrain(self, lc: Operand) -> None:
        """Require ``lc == 0`` over the committed values."""
        self._constraints.append(LinearCombination.of(lc))

    def verify(self, proof: R1CSProof, gens: ProofGens) -> None:
        """
        Raises:
            R1CSError: If the proof does not verify for these commitments,
                constraints, generator parameters and transcript.
        """
        group = self.pc_gens.group
        count = len(self._commitments)

        if proof.group is not group:
            raise R1CSError(f"Proof was produced over {proof.group.name}, not {group.name}")
        if len(proof.openings) != count:
            raise R1CSError(f"Proof covers {len(proof.openings)} commitments, verifier has {count}")
        if count > gens.party_capacity:
            raise R1CSError(
                f"{count} commitments exceed generator capacity {gens.party_capacity}"
            )

        public = []
        for q, lc in enumerate(self._constraints):
            terms = lc.simplify(group.order)
            for var in terms:
                if var != ONE and var.index >= count:
                    raise R1CSError(f"Constraint {q} references unknown variable {var.index}")
            if terms:
                public.append((q, terms))
        if len(proof.constraints) != len(public):
            raise R1CSError(
                f"Proof covers {len(proof.constraints)} constraints, verifier has {len(public)}"
            )

        try:
            points = [group.decode(c) for c in self._commitments]
        except ValueError as e:
            raise R1CSError(f"Invalid commitment: {e}") from e

        _bind_statement(self.transcript, gens, count, len(public))
        for opening in proof.openings:
            self.transcript.append_message(b"A", opening.A)
        for constraint in proof.constraints:
            self.transcript.append_message(b"R", constraint.R)
        e = self.transcript.challenge_scalar(b"e", group.order)

        for i, (opening, V) in enumerate(zip(proof.openings, points, strict=True)):
            try:
                A = group.decode(opening.A)
            except ValueError as exc:
                raise R1CSError(f"Invalid nonce point in opening {i}: {exc}") from exc
            lhs = self.pc_gens.commit(opening.s, opening.t)
            rhs = group.add(A, group.mul(e, V))
            if not group.equals(lhs, rhs):
                raise R1CSError(f"Opening {i} does not verify")

        for (q, terms), constraint in zip(public, proof.constraints, strict=True):
            try:
                R = group.decode(constraint.R)
            except ValueError as exc:
                raise R1CSError(f"Invalid nonce point for constraint {q}: {exc}") from exc
            P = group.multiscalar_mul([
                (c, self.pc_gens.H if var == ONE else points[var.index])
                for var, c in terms.items()
            ])
            lhs = group.mul(constraint.z, self.pc_gens.G)
            rhs = group.add(R, group.mul(e, P))
            if not group.equals(lhs, rhs):
                raise R1CSError(f"Constraint {q} is not satisfied by the commitments")
