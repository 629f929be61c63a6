"""
Fiat–Shamir transcript.

A running Blake2b-512 state into which every public protocol message is
absorbed with its label and length. Challenges are squeezed from a copy of
the state and then fed back in, so two challenges never repeat and every
challenge depends on everything absorbed before it.

Two transcripts agree on a challenge only if they were created with the same
domain label and absorbed byte-identical messages in the same order; that is
what separates the protocol variants from each other.
"""

from __future__ import annotations

import hashlib

_PERSONALIZATION = b"txid-transcript"


class Transcript:
    """Labelled, length-framed Fiat–Shamir transcript."""

    def __init__(self, label: bytes) -> None:
        self._state = hashlib.blake2b(digest_size=64, person=_PERSONALIZATION)
        self.append_message(b"dom-sep", label)

    def append_message(self, label: bytes, message: bytes) -> None:
        self._state.update(len(label).to_bytes(4, "little"))
        self._state.update(label)
        self._state.update(len(message).to_bytes(8, "little"))
        self._state.update(message)

    def append_u64(self, label: bytes, value: int) -> None:
        self.append_message(label, value.to_bytes(8, "little"))

    def challenge_bytes(self, label: bytes) -> bytes:
        fork = self._state.copy()
        fork.update(len(label).to_bytes(4, "little"))
        fork.update(label)
        fork.update(b"challenge")
        digest = fork.digest()
        self.append_message(label, digest)
        return digest

    def challenge_scalar(self, label: bytes, order: int) -> int:
        """Derive a challenge scalar, wide-reduced from 512 bits."""
        return int.from_bytes(self.challenge_bytes(label), "little") % order
