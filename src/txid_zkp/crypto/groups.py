"""
Prime-order group adapters for the proof backend.

Two curve libraries sit behind one ``Group`` interface:

- ``Ed25519Group`` — the classic curve, backed by libsodium through PyNaCl's
  ``nacl.bindings.crypto_core_ed25519_*`` / ``crypto_scalarmult_ed25519_*``.
  Points are ``EdwardsPoint`` values holding their canonical 32-byte encoding.
- ``Secp256k1Group`` — the alternate curve used by the "plus" variant, backed
  by the pure-Python ``ecdsa`` library. Points are ``ecdsa`` Jacobian points
  and are serialized x-only (32 bytes, even y), as in BIP-340.

Both expose 32-byte point and scalar encodings, so every commitment and every
proof element has a fixed width regardless of the curve that produced it.

References:
    [RFC8032] Edwards-Curve Digital Signature Algorithm, §5.1.2 (encoding).
    [BIP340]  Schnorr Signatures for secp256k1, "x-only" public keys.
    [H2C]     IETF draft-irtf-cfrg-hash-to-curve, §5 (try-and-increment).
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import ecdsa
import ecdsa.ellipticcurve as ec
import nacl.bindings

# ==============================================================================
# Curve constants
# ==============================================================================

# Ed25519 prime-order subgroup size (L)
ED25519_L = 2**252 + 27742317777372353535851937790883648493

# secp256k1 field prime and group order
SECP256K1_P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

POINT_SIZE = 32
SCALAR_SIZE = 32

# Bytes drawn per scalar before reduction; 512 bits keeps the modular bias negligible.
WIDE_SCALAR_SIZE = 64

_HASH_TO_CURVE_ATTEMPTS = 1000

RandomBytes = Callable[[int], bytes]


@dataclass(frozen=True)
class EdwardsPoint:
    """An Ed25519 group element in its canonical compressed encoding."""

    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != POINT_SIZE:
            raise ValueError(f"Expected {POINT_SIZE} bytes, got {len(self.data)}")

    def __repr__(self) -> str:
        return f"EdwardsPoint({self.data.hex()})"


class Group(ABC):
    """A prime-order group with fixed-width point and scalar encodings."""

    name: str
    order: int

    @property
    @abstractmethod
    def identity(self) -> Any:
        """The neutral element."""

    @property
    @abstractmethod
    def base(self) -> Any:
        """The standard base point of the curve."""

    @abstractmethod
    def add(self, p: Any, q: Any) -> Any:
        """Return p + q."""

    @abstractmethod
    def mul(self, k: int, p: Any) -> Any:
        """Return k·p; the scalar is reduced modulo the group order first."""

    @abstractmethod
    def encode(self, p: Any) -> bytes:
        """Serialize a point to 32 bytes."""

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """Parse 32 bytes into a point. Raises ValueError if they encode no valid point."""

    @abstractmethod
    def equals(self, p: Any, q: Any) -> bool:
        """Group-element equality."""

    @abstractmethod
    def encode_scalar(self, k: int) -> bytes:
        """Serialize a scalar in [0, order) to 32 bytes."""

    @abstractmethod
    def decode_scalar(self, data: bytes) -> int:
        """Parse a canonical 32-byte scalar. Raises ValueError if it is not reduced."""

    @abstractmethod
    def hash_to_curve(self, seed: bytes) -> Any:
        """Map a seed to a group element with no known discrete log."""

    def is_encodable(self, p: Any) -> bool:
        """True if ``encode`` accepts the point without losing information."""
        return not self.equals(p, self.identity)

    def random_scalar(self, random_bytes: RandomBytes) -> int:
        """Draw a uniform non-zero scalar from the given random-bytes source."""
        while True:
            k = int.from_bytes(random_bytes(WIDE_SCALAR_SIZE), "little") % self.order
            if k:
                return k

    def neg_scalar(self, k: int) -> int:
        return (-k) % self.order

    def multiscalar_mul(self, pairs: Iterable[tuple[int, Any]]) -> Any:
        """Return Σ k_i·P_i."""
        acc = self.identity
        for k, p in pairs:
            acc = self.add(acc, self.mul(k, p))
        return acc


# ==============================================================================
# Ed25519 through libsodium (PyNaCl)
# ==============================================================================


class Ed25519Group(Group):
    """
    The prime-order subgroup of Ed25519 via libsodium.

    libsodium refuses scalar multiplication by zero and by small-order points,
    so the identity is handled here rather than passed down to the bindings.
    """

    name = "ed25519"
    order = ED25519_L

    _IDENTITY = EdwardsPoint(b"\x01" + b"\x00" * 31)

    def __init__(self) -> None:
        one = (1).to_bytes(SCALAR_SIZE, "little")
        self._base = EdwardsPoint(nacl.bindings.crypto_scalarmult_ed25519_base_noclamp(one))

    @property
    def identity(self) -> EdwardsPoint:
        return self._IDENTITY

    @property
    def base(self) -> EdwardsPoint:
        return self._base

    def add(self, p: EdwardsPoint, q: EdwardsPoint) -> EdwardsPoint:
        if p == self._IDENTITY:
            return q
        if q == self._IDENTITY:
            return p
        return EdwardsPoint(nacl.bindings.crypto_core_ed25519_add(p.data, q.data))

    def mul(self, k: int, p: EdwardsPoint) -> EdwardsPoint:
        k %= self.order
        if k == 0 or p == self._IDENTITY:
            return self._IDENTITY
        scalar = k.to_bytes(SCALAR_SIZE, "little")
        if p == self._base:
            return EdwardsPoint(nacl.bindings.crypto_scalarmult_ed25519_base_noclamp(scalar))
        return EdwardsPoint(nacl.bindings.crypto_scalarmult_ed25519_noclamp(scalar, p.data))

    def encode(self, p: EdwardsPoint) -> bytes:
        return p.data

    def decode(self, data: bytes) -> EdwardsPoint:
        data = bytes(data)
        if len(data) != POINT_SIZE:
            raise ValueError(f"Expected {POINT_SIZE} bytes, got {len(data)}")
        # Rejects non-canonical encodings, small-order points and points off the main subgroup.
        if not nacl.bindings.crypto_core_ed25519_is_valid_point(data):
            raise ValueError(f"Not a valid Ed25519 point: {data.hex()}")
        return EdwardsPoint(data)

    def equals(self, p: EdwardsPoint, q: EdwardsPoint) -> bool:
        return p.data == q.data

    def encode_scalar(self, k: int) -> bytes:
        return (k % self.order).to_bytes(SCALAR_SIZE, "little")

    def decode_scalar(self, data: bytes) -> int:
        if len(data) != SCALAR_SIZE:
            raise ValueError(f"Expected {SCALAR_SIZE} bytes, got {len(data)}")
        k = int.from_bytes(data, "little")
        if k >= self.order:
            raise ValueError("Scalar is not canonically reduced")
        return k

    def hash_to_curve(self, seed: bytes) -> EdwardsPoint:
        """
        Try-and-increment: hash ``seed || counter`` with Blake2b256 until the
        digest is itself the canonical encoding of a main-subgroup point.
        Roughly one candidate in sixteen qualifies.
        """
        for counter in range(_HASH_TO_CURVE_ATTEMPTS):
            candidate = hashlib.blake2b(
                seed + counter.to_bytes(4, "little"), digest_size=32
            ).digest()
            if nacl.bindings.crypto_core_ed25519_is_valid_point(candidate):
                return EdwardsPoint(candidate)
        raise RuntimeError(
            f"hash_to_curve: failed to find a valid point in {_HASH_TO_CURVE_ATTEMPTS} iterations"
        )


# ==============================================================================
# secp256k1 through ecdsa
# ==============================================================================

_SECP_CURVE = ecdsa.SECP256k1.curve
_SECP_GENERATOR = ecdsa.SECP256k1.generator


def lift_x(x: int) -> ec.PointJacobi:
    """
    Return the secp256k1 point with x-coordinate ``x`` and even y.

    Raises:
        ValueError: If x is out of range or x³+7 is not a square mod p.
    """
    if not 0 <= x < SECP256K1_P:
        raise ValueError("x-coordinate out of range")
    y_sq = (pow(x, 3, SECP256K1_P) + 7) % SECP256K1_P
    y = pow(y_sq, (SECP256K1_P + 1) // 4, SECP256K1_P)
    if (y * y) % SECP256K1_P != y_sq:
        raise ValueError(f"X coordinate 0x{x:064x} does not correspond to a curve point")
    if y % 2:
        y = SECP256K1_P - y
    return ec.PointJacobi(_SECP_CURVE, x, y, 1)


class Secp256k1Group(Group):
    """
    secp256k1 via the ``ecdsa`` library, with x-only point encoding.

    Only points with an even y coordinate are encodable; callers that publish
    points (commitments, proof nonces) must normalize before encoding.
    """

    name = "secp256k1"
    order = SECP256K1_N

    def __init__(self) -> None:
        self._base = _SECP_GENERATOR

    @property
    def identity(self) -> ec.Point:
        return ec.INFINITY

    @property
    def base(self) -> ec.PointJacobi:
        return self._base

    def add(self, p: Any, q: Any) -> Any:
        if p == ec.INFINITY:
            return q
        if q == ec.INFINITY:
            return p
        return p + q

    def mul(self, k: int, p: Any) -> Any:
        k %= self.order
        if k == 0 or p == ec.INFINITY:
            return ec.INFINITY
        return k * p

    def is_encodable(self, p: Any) -> bool:
        return p != ec.INFINITY and p.y() % 2 == 0

    def encode(self, p: Any) -> bytes:
        if p == ec.INFINITY:
            raise ValueError("Cannot encode the point at infinity")
        if p.y() % 2:
            raise ValueError("Point has odd y and has no x-only encoding")
        return p.x().to_bytes(POINT_SIZE, "big")

    def decode(self, data: bytes) -> ec.PointJacobi:
        data = bytes(data)
        if len(data) != POINT_SIZE:
            raise ValueError(f"Expected {POINT_SIZE} bytes, got {len(data)}")
        return lift_x(int.from_bytes(data, "big"))

    def equals(self, p: Any, q: Any) -> bool:
        if p == ec.INFINITY or q == ec.INFINITY:
            return p == ec.INFINITY and q == ec.INFINITY
        return p.x() == q.x() and p.y() == q.y()

    def encode_scalar(self, k: int) -> bytes:
        return (k % self.order).to_bytes(SCALAR_SIZE, "big")

    def decode_scalar(self, data: bytes) -> int:
        if len(data) != SCALAR_SIZE:
            raise ValueError(f"Expected {SCALAR_SIZE} bytes, got {len(data)}")
        k = int.from_bytes(data, "big")
        if k >= self.order:
            raise ValueError("Scalar is not canonically reduced")
        return k

    def hash_to_curve(self, seed: bytes) -> ec.PointJacobi:
        """
        Try-and-increment over x = Blake2b256(seed) mod p, returning the even-y
        lift of the first x for which x³+7 is a quadratic residue.
        """
        digest = hashlib.blake2b(seed, digest_size=32).digest()
        x = int.from_bytes(digest, "big") % SECP256K1_P
        for _ in range(_HASH_TO_CURVE_ATTEMPTS):
            y_sq = (pow(x, 3, SECP256K1_P) + 7) % SECP256K1_P
            # Euler criterion
            if pow(y_sq, (SECP256K1_P - 1) // 2, SECP256K1_P) == 1:
                pt = lift_x(x)
                # Precomputation makes repeated multiples of a fixed generator cheap.
                return ec.PointJacobi(
                    _SECP_CURVE, pt.x(), pt.y(), 1, order=SECP256K1_N, generator=True
                )
            x = (x + 1) % SECP256K1_P
        raise RuntimeError(
            f"hash_to_curve: failed to find a valid point in {_HASH_TO_CURVE_ATTEMPTS} iterations"
        )


ED25519 = Ed25519Group()
SECP256K1 = Secp256k1Group()

GROUPS: dict[str, Group] = {g.name: g for g in (ED25519, SECP256K1)}
