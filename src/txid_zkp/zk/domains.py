"""
Transcript domains for the three proof variants.

Each domain fixes the Fiat–Shamir label, the generator parameters, the number
of values committed per identifier and the curve. Prover and verifier must use
the same domain; a proof made under one domain never verifies under another.
"""

from __future__ import annotations

from dataclasses import dataclass

from txid_zkp.crypto.groups import ED25519, SECP256K1, Group
from txid_zkp.crypto.pedersen import PedersenGens
from txid_zkp.crypto.r1cs import ProofGens


@dataclass(frozen=True)
class TranscriptDomain:
    """
    A fixed protocol variant.

    Attributes:
        name: Short identifier used in logs and lookups.
        label: Transcript label mixed into every challenge.
        gens: Generator parameters absorbed into the transcript.
        limbs: Values committed per identifier (1 = reduced scalar, 4 = u64 limbs).
        group: Curve the commitments live on.
    """
    name: str
    label: bytes
    gens: ProofGens
    limbs: int
    group: Group

    @property
    def pc_gens(self) -> PedersenGens:
        return PedersenGens.default(self.group)


CLASSIC = TranscriptDomain(
    name="classic",
    label=b"TxIDPedersenZKP",
    gens=ProofGens(bit_width=64, party_capacity=1),
    limbs=1,
    group=ED25519,
)

CLASSIC_4LIMB = TranscriptDomain(
    name="classic-4limb",
    label=b"TxIDPedersenZKP4Limb",
    gens=ProofGens(bit_width=64, party_capacity=4),
    limbs=4,
    group=ED25519,
)

PLUS = TranscriptDomain(
    name="plus",
    label=b"TxIDPedersenZKPPlus",
    gens=ProofGens(bit_width=64, party_capacity=1),
    limbs=1,
    group=SECP256K1,
)

DOMAINS: dict[str, TranscriptDomain] = {d.name: d for d in (CLASSIC, CLASSIC_4LIMB, PLUS)}


def get_domain(name: str) -> TranscriptDomain:
    """Look up a domain by name. Raises KeyError for unknown names."""
    try:
        return DOMAINS[name]
    except KeyError:
        raise KeyError(f"Unknown transcript domain '{name}'. Known: {', '.join(DOMAINS)}") from None
