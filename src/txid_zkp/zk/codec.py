"""
Transaction identifier codec.

Turns a hex transaction hash into the 32 raw bytes every variant starts from,
and those bytes into the field elements each variant commits to:

- ``to_reduced_scalar`` — one scalar, little-endian, reduced mod the group
  order. Not injective: identifiers at or above the order collide.
- ``to_limb_vector`` — four little-endian u64 limbs. Lossless.
"""

from __future__ import annotations

import binascii

from txid_zkp.errors import InputDecodingError

TXID_SIZE = 32
LIMB_SIZE = 8
LIMB_COUNT = TXID_SIZE // LIMB_SIZE


def decode_hex(value: str) -> bytes:
    """
    Strictly decode a hex string (no whitespace, even length).

    Raises:
        InputDecodingError: If the string is not valid hex.
    """
    try:
        return binascii.unhexlify(value)
    except (binascii.Error, ValueError) as e:
        raise InputDecodingError(f"Invalid hex string: {e}") from e


def decode_tx_hash(
    hex_string: str,
    *,
    hex_error: str | None = None,
    length_error: str | None = None,
) -> bytes:
    """
    Decode a transaction hash into exactly 32 raw bytes.

    Every leading ``0x`` is stripped, so ``0x0xab..`` decodes like ``ab..``. Input longer than 32 bytes is accepted and
    truncated to its first 32 bytes.

    Args:
        hex_string: The hex-encoded identifier.
        hex_error: Public message when the input is not hex (default "invalid tx_hash").
        length_error: Public message when fewer than 32 bytes decode.

    Raises:
        InputDecodingError: On invalid hex or fewer than 32 bytes.
    """
    while hex_string.startswith("0x"):
        hex_string = hex_string[2:]
    try:
        raw = decode_hex(hex_string)
    except InputDecodingError as e:
        raise InputDecodingError(str(e), public_message=hex_error) from e
    if len(raw) < TXID_SIZE:
        raise InputDecodingError(
            f"tx_hash decodes to {len(raw)} bytes, need at least {TXID_SIZE}",
            public_message=length_error,
        )
    return raw[:TXID_SIZE]


def to_reduced_scalar(raw: bytes, order: int) -> int:
    """Interpret 32 bytes as a little-endian integer reduced modulo ``order``."""
    if len(raw) != TXID_SIZE:
        raise ValueError(f"Expected {TXID_SIZE} bytes, got {len(raw)}")
    return int.from_bytes(raw, "little") % order


def to_limb_vector(raw: bytes) -> list[int]:
    """Split 32 bytes into four little-endian u64 limbs, lowest bytes first."""
    if len(raw) != TXID_SIZE:
        raise ValueError(f"Expected {TXID_SIZE} bytes, got {len(raw)}")
    return [
        int.from_bytes(raw[i:i + LIMB_SIZE], "little")
        for i in range(0, TXID_SIZE, LIMB_SIZE)
    ]
