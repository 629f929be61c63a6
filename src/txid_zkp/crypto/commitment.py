"""
One 32-byte view over every commitment representation.

Classic proofs produce Ed25519 ``EdwardsPoint`` values, the "plus" variant
produces ``ecdsa`` secp256k1 points, and verify requests arrive as raw byte
arrays. ``commitment_bytes`` maps each of them to the same 32 raw bytes so the
serialization layer and the handlers never need to know which curve library a
commitment came from.
"""

from __future__ import annotations

import binascii
from dataclasses import dataclass
from functools import singledispatch
from typing import Any

import ecdsa.ellipticcurve as ec

from txid_zkp.crypto.groups import POINT_SIZE, SECP256K1, EdwardsPoint


@singledispatch
def commitment_bytes(obj: Any) -> bytes:
    """Return the 32 raw bytes of a commitment in any supported representation."""
    raise TypeError(f"Unsupported commitment type: {type(obj).__name__}")


@commitment_bytes.register
def _(obj: EdwardsPoint) -> bytes:
    return obj.data


@commitment_bytes.register(bytes)
@commitment_bytes.register(bytearray)
def _(obj) -> bytes:
    if len(obj) != POINT_SIZE:
        raise ValueError(f"Commitment must be {POINT_SIZE} bytes, got {len(obj)}")
    return bytes(obj)


@commitment_bytes.register(ec.PointJacobi)
@commitment_bytes.register(ec.Point)
def _(obj) -> bytes:
    return SECP256K1.encode(obj)


@dataclass(frozen=True)
class Commitment:
    """An immutable 32-byte Pedersen commitment."""

    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != POINT_SIZE:
            raise ValueError(f"Commitment must be {POINT_SIZE} bytes, got {len(self.data)}")

    @classmethod
    def of(cls, obj: Any) -> Commitment:
        if isinstance(obj, Commitment):
            return obj
        return cls(commitment_bytes(obj))

    @classmethod
    def from_hex(cls, value: str) -> Commitment:
        return cls(binascii.unhexlify(value))

    def hex(self) -> str:
        return self.data.hex()

    def __bytes__(self) -> bytes:
        return self.data


@commitment_bytes.register
def _(obj: Commitment) -> bytes:
    return obj.data
