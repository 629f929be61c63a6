"""
Pedersen commitment generators.

Mathematical foundation:
    C = r·G + v·H
    where G is the curve base point and H = hash_to_curve(encode(G)) is a
    nothing-up-my-sleeve point with unknown discrete log w.r.t. G.

    - Hiding:  C reveals nothing about v without r.
    - Binding: opening C to a different (v', r') requires log_G(H).

References:
    [Ped91] T.P. Pedersen, "Non-Interactive and Information-Theoretic Secure
            Verifiable Secret Sharing", CRYPTO '91, §3.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from txid_zkp.crypto.groups import GROUPS, Group, RandomBytes

# Prefix mixed into the NUMS derivation so H cannot collide with other schemes' generators.
NUMS_DOMAIN = b"txid-zkp/pedersen/H/"


class PedersenGens:
    """
    The (G, H) generator pair of one group.

    Usage:
        gens = PedersenGens.default(ED25519)
        C = gens.commit(value, blinding)
    """

    def __init__(self, group: Group, G: Any, H: Any) -> None:
        self.group = group
        self.G = G
        self.H = H

    @classmethod
    def default(cls, group: Group) -> PedersenGens:
        return _default_gens(group.name)

    def commit(self, value: int, blinding: int) -> Any:
        """Return C = blinding·G + value·H."""
        return self.group.add(self.group.mul(blinding, self.G), self.group.mul(value, self.H))

    def opens_to(self, commitment: Any, value: int, blinding: int) -> bool:
        """Check that ``commitment`` equals blinding·G + value·H."""
        return self.group.equals(commitment, self.commit(value, blinding))

    def fresh_blinding(self, value: int, random_bytes: RandomBytes) -> tuple[int, Any]:
        """
        Draw a blinding factor whose commitment to ``value`` is encodable.

        On Ed25519 the first draw is always accepted; on secp256k1 the draw is
        repeated until the commitment has an even y (two draws on average), so
        the x-only encoding identifies it uniquely.

        Returns:
            (blinding, commitment point)
        """
        while True:
            blinding = self.group.random_scalar(random_bytes)
            point = self.commit(value, blinding)
            if self.group.is_encodable(point):
                return blinding, point


@lru_cache(maxsize=None)
def _default_gens(group_name: str) -> PedersenGens:
    group = GROUPS[group_name]
    G = group.base
    H = group.hash_to_curve(NUMS_DOMAIN + group.encode(G))
    return PedersenGens(group, G, H)
