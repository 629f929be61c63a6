"""
Unit tests for txid_zkp.zk.protocol — identifier proofs under each transcript domain.

Every test injects a seeded random source so proofs are reproducible.
"""

import random

import pytest

from txid_zkp.crypto.commitment import Commitment
from txid_zkp.crypto.pedersen import PedersenGens
from txid_zkp.crypto.r1cs import R1CSProof
from txid_zkp.errors import ProofDecodingError, ProofGenerationSelfCheckFailure
from txid_zkp.zk.codec import to_limb_vector
from txid_zkp.zk.domains import CLASSIC, CLASSIC_4LIMB, DOMAINS, PLUS, get_domain
from txid_zkp.zk.protocol import (
    TxidProofProtocol,
    prove_txid_commitment,
    prove_txid_commitment_4limb,
    prove_txid_commitment_from_hex,
    prove_txid_commitment_plus,
    verify_txid_commitment,
    verify_txid_commitment_4limb,
    verify_txid_commitment_plus,
)

TXID = bytes.fromhex("5c504ed432cb51138bcf09aa5e8a410dd4a1e204ef84bfed1be16dfba1b22060")


@pytest.fixture
def rng():
    return random.Random(2024).randbytes


@pytest.fixture(params=[CLASSIC, CLASSIC_4LIMB, PLUS], ids=lambda d: d.name)
def protocol(request, rng):
    return TxidProofProtocol(request.param, rng)


# ==============================================================================
# Domains
# ==============================================================================


class TestDomains:

    def test_labels_distinct(self):
        labels = [d.label for d in DOMAINS.values()]
        assert len(set(labels)) == len(labels)

    def test_generator_parameters(self):
        assert (CLASSIC.gens.bit_width, CLASSIC.gens.party_capacity) == (64, 1)
        assert (CLASSIC_4LIMB.gens.bit_width, CLASSIC_4LIMB.gens.party_capacity) == (64, 4)
        assert (PLUS.gens.bit_width, PLUS.gens.party_capacity) == (64, 1)

    def test_lookup(self):
        assert get_domain("plus") is PLUS
        with pytest.raises(KeyError):
            get_domain("nope")


# ==============================================================================
# Completeness and soundness checks
# ==============================================================================


class TestRoundTrip:

    def test_prove_then_verify(self, protocol):
        commitments, proof = protocol.prove_txid(TXID)
        assert len(commitments) == protocol.domain.limbs
        assert protocol.verify(commitments, proof)

    def test_verify_after_serialization(self, protocol):
        commitments, proof = protocol.prove_txid(TXID)
        wire = [Commitment.from_hex(c.hex()) for c in commitments]
        parsed = R1CSProof.from_bytes(proof.to_bytes(), protocol.domain.group)
        assert protocol.verify(wire, parsed)

    def test_prove_checked(self, protocol):
        commitments, proof = protocol.prove_checked(TXID)
        assert protocol.verify(commitments, proof)

    def test_boundary_values(self, protocol):
        for raw in (b"\x00" * 32, b"\xff" * 32):
            commitments, proof = protocol.prove_txid(raw)
            assert protocol.verify(commitments, proof)

    def test_commitments_are_hiding(self, protocol):
        """Two proofs of the same identifier use fresh blindings."""
        first, _ = protocol.prove_txid(TXID)
        second, _ = protocol.prove_txid(TXID)
        assert first != second


class TestTampering:

    @pytest.mark.parametrize("domain", [CLASSIC, CLASSIC_4LIMB, PLUS], ids=lambda d: d.name)
    def test_every_bit_flip_rejected(self, domain, rng):
        """A flipped bit either fails to parse or fails to verify."""
        protocol = TxidProofProtocol(domain, rng)
        commitments, proof = protocol.prove_txid(TXID)
        data = proof.to_bytes()
        # One bit in every byte, cycling through bit positions.
        for i in range(len(data)):
            tampered = bytearray(data)
            tampered[i] ^= 1 << (i % 8)
            try:
                parsed = R1CSProof.from_bytes(bytes(tampered), domain.group)
            except ProofDecodingError:
                continue
            assert not protocol.verify(commitments, parsed)

    def test_proof_against_other_call(self, protocol):
        commitments_a, _ = protocol.prove_txid(TXID)
        _, proof_b = protocol.prove_txid(TXID)
        assert not protocol.verify(commitments_a, proof_b)

    def test_empty_commitments(self, protocol):
        _, proof = protocol.prove_txid(TXID)
        assert not protocol.verify([], proof)

    def test_commitment_not_a_point(self, rng):
        protocol = TxidProofProtocol(CLASSIC, rng)
        _, proof = protocol.prove_txid(TXID)
        assert not protocol.verify([Commitment(b"\x01" + b"\x00" * 31)], proof)


class TestDomainSeparation:

    def test_4limb_proof_rejected_by_classic(self, rng):
        commitments, proof = TxidProofProtocol(CLASSIC_4LIMB, rng).prove_txid(TXID)
        classic = TxidProofProtocol(CLASSIC, rng)
        assert not classic.verify(commitments, proof)
        assert not classic.verify(commitments[:1], proof)

    def test_classic_proof_rejected_by_4limb(self, rng):
        commitments, proof = TxidProofProtocol(CLASSIC, rng).prove_txid(TXID)
        assert not TxidProofProtocol(CLASSIC_4LIMB, rng).verify(commitments, proof)

    def test_single_opening_under_wrong_label(self, rng):
        """Same curve and count, different label."""
        protocol = TxidProofProtocol(CLASSIC_4LIMB, rng)
        commitments, proof = protocol.prove([1234])
        assert not TxidProofProtocol(CLASSIC, rng).verify(commitments, proof)

    def test_plus_proof_rejected_by_classic(self, rng):
        commitments, proof = TxidProofProtocol(PLUS, rng).prove_txid(TXID)
        try:
            reparsed = R1CSProof.from_bytes(proof.to_bytes(), CLASSIC.group)
        except ProofDecodingError:
            return
        assert not TxidProofProtocol(CLASSIC, rng).verify(commitments, reparsed)

    def test_classic_proof_rejected_by_plus(self, rng):
        commitments, proof = TxidProofProtocol(CLASSIC, rng).prove_txid(TXID)
        # Little-endian Ed25519 scalars may not be canonical big-endian secp256k1 scalars.
        try:
            reparsed = R1CSProof.from_bytes(proof.to_bytes(), PLUS.group)
        except ProofDecodingError:
            return
        assert not TxidProofProtocol(PLUS, rng).verify(commitments, reparsed)


# ==============================================================================
# Encoding
# ==============================================================================


class TestEncoding:

    def test_4limb_commitments_open_to_limbs(self, rng):
        """Commitment i opens to the i-th little-endian u64 limb."""
        protocol = TxidProofProtocol(CLASSIC_4LIMB, rng)
        values = protocol.encode(TXID)
        assert values == to_limb_vector(TXID)
        assert values[0] == int.from_bytes(TXID[:8], "little")

        # Replay the protocol's random draws to recover the blindings.
        replay = random.Random(2024).randbytes
        group = CLASSIC_4LIMB.group
        pc_gens = PedersenGens.default(group)
        commitments, _ = TxidProofProtocol(CLASSIC_4LIMB, replay).prove(values)

        check = random.Random(2024).randbytes
        for value, commitment in zip(values, commitments):
            blinding = group.random_scalar(check)
            assert commitment.data == group.encode(pc_gens.commit(value, blinding))

    def test_scalar_encoding_is_little_endian_reduced(self, rng):
        value = TxidProofProtocol(CLASSIC, rng).encode(TXID)
        assert value == [int.from_bytes(TXID, "little") % CLASSIC.group.order]
        value = TxidProofProtocol(PLUS, rng).encode(TXID)
        assert value == [int.from_bytes(TXID, "little") % PLUS.group.order]

    def test_empty_values_rejected(self, protocol):
        with pytest.raises(ValueError):
            protocol.prove([])

    def test_verification_does_not_bind_the_value(self, rng):
        """
        The verifier constraint is var - var: a valid proof for one identifier
        says nothing about which identifier was committed.
        """
        protocol = TxidProofProtocol(CLASSIC, rng)
        commitments, proof = protocol.prove_txid(b"\x22" * 32)
        claimed = protocol.encode(b"\x11" * 32)[0]

        # A verifier told the hash was 0x11...11 still accepts...
        assert claimed != protocol.encode(b"\x22" * 32)[0]
        assert protocol.verify(commitments, proof)

        # ...and a commitment to an arbitrary value verifies just as well.
        arbitrary, arbitrary_proof = protocol.prove([claimed + 1])
        assert protocol.verify(arbitrary, arbitrary_proof)

    def test_value_stays_out_of_the_proof(self, protocol):
        """The value constraint is private: no constraint entry, no c_0·H to recover."""
        _, proof = protocol.prove_txid(TXID)
        assert proof.constraints == ()

    def test_commitment_points_computed_once(self, rng, monkeypatch):
        """Each commitment point comes from fresh_blinding and is not recomputed."""
        calls = []
        commit = PedersenGens.commit

        def counting_commit(self, value, blinding):
            calls.append(value)
            return commit(self, value, blinding)

        monkeypatch.setattr(PedersenGens, "commit", counting_commit)
        TxidProofProtocol(CLASSIC_4LIMB, rng).prove_txid(TXID)
        # Ed25519 accepts every first draw: one commitment and one nonce per limb
        assert len(calls) == 2 * CLASSIC_4LIMB.limbs


# ==============================================================================
# Self-check
# ==============================================================================


class TestSelfCheck:

    def test_failure_surfaces(self, rng, monkeypatch):
        protocol = TxidProofProtocol(CLASSIC_4LIMB, rng)
        monkeypatch.setattr(protocol, "verify", lambda commitments, proof: False)
        with pytest.raises(ProofGenerationSelfCheckFailure) as exc:
            protocol.prove_checked(TXID)
        assert exc.value.status_code == 500
        assert exc.value.public_message == "proof failed"


# ==============================================================================
# Module-level helpers
# ==============================================================================


class TestHelpers:

    def test_classic(self, rng):
        commitment, proof_bytes, verified = prove_txid_commitment(123456, rng)
        assert verified
        assert verify_txid_commitment(commitment, proof_bytes)

    def test_classic_fake_commitment(self, rng):
        _, proof_bytes, _ = prove_txid_commitment(123456, rng)
        gens = PedersenGens.default(CLASSIC.group)
        fake = Commitment.of(gens.commit(999999, 1))
        assert not verify_txid_commitment(fake, proof_bytes)

    def test_from_hex(self, rng):
        commitment, proof_bytes, verified = prove_txid_commitment_from_hex("0x" + TXID.hex(), rng)
        assert verified
        assert verify_txid_commitment(commitment, proof_bytes)

    def test_4limb(self, rng):
        commitments, proof_bytes, verified = prove_txid_commitment_4limb(TXID, rng)
        assert verified
        assert len(commitments) == 4
        assert verify_txid_commitment_4limb(commitments, proof_bytes)

    def test_plus(self, rng):
        commitments, proof_bytes = prove_txid_commitment_plus(TXID, rng)
        assert len(commitments) == 1
        assert verify_txid_commitment_plus(commitments, proof_bytes)
        assert not verify_txid_commitment_plus(commitments, prove_txid_commitment_plus(TXID, rng)[1])

    def test_malformed_proof_bytes(self):
        with pytest.raises(ProofDecodingError):
            verify_txid_commitment(Commitment(bytes(32)), b"\x00" * 10)
