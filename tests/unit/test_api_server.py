import random

import pytest
from fastapi.testclient import TestClient

from txid_zkp.api.server import create_app
from txid_zkp.config import ServerConfig
from txid_zkp.crypto.groups import ED25519
from txid_zkp.crypto.pedersen import PedersenGens
from txid_zkp.errors import ProofGenerationSelfCheckFailure
from txid_zkp.zk.protocol import TxidProofProtocol

TX_HASH = "0x" + "11" * 32


@pytest.fixture
def client():
    # Seeded randomness keeps commitments and proofs reproducible across runs
    app = create_app(ServerConfig(), random_bytes=random.Random(5010).randbytes)
    with TestClient(app) as c:
        yield c


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# ==============================================================================
# Classic single-scalar
# ==============================================================================


def test_generate_and_verify(client):
    response = client.post("/zkp/generate", json={"tx_hash": TX_HASH})
    assert response.status_code == 200
    body = response.json()
    assert len(body["commitments"]) == 1
    assert len(body["commitments"][0]) == 64
    assert body["proof"]

    response = client.post(
        "/zkp/verify",
        json={"commitment": body["commitments"][0], "proof": body["proof"]},
    )
    assert response.status_code == 200
    assert response.json() == {"verified": True}


def test_generate_short_hash(client):
    response = client.post("/zkp/generate", json={"tx_hash": "0x1234"})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid tx_hash"}


def test_generate_bad_hex(client):
    response = client.post("/zkp/generate", json={"tx_hash": "0x" + "zz" * 32})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid tx_hash"}


def test_generate_missing_field(client):
    # Should fail pydantic validation
    response = client.post("/zkp/generate", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid request"}


@pytest.mark.parametrize("route", ["/zkp/generate", "/zkp/prove_plus", "/zkp/generate_bp4"])
def test_tx_hash_wrong_type(client, route):
    response = client.post(route, json={"tx_hash": 5})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid request"}


def test_verify_wrong_types(client):
    response = client.post("/zkp/verify_plus", json={"commitments": "11" * 32, "proof": "00"})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid request"}


def test_generate_repeated_prefix(client):
    response = client.post("/zkp/generate", json={"tx_hash": "0x0x" + "11" * 32})
    assert response.status_code == 200
    doubled = response.json()
    response = client.post(
        "/zkp/verify",
        json={"commitment": doubled["commitments"][0], "proof": doubled["proof"]},
    )
    assert response.json() == {"verified": True}


def test_verify_bad_commitment(client):
    response = client.post("/zkp/verify", json={"commitment": "11" * 31, "proof": "00"})
    assert response.status_code == 400
    assert response.json() == {"error": "bad commitment"}


def test_verify_bad_proof(client):
    response = client.post("/zkp/verify", json={"commitment": "11" * 32, "proof": "not hex"})
    assert response.status_code == 400
    assert response.json() == {"error": "bad proof"}


def test_verify_unparseable_proof(client):
    response = client.post("/zkp/verify", json={"commitment": "11" * 32, "proof": "00" * 10})
    assert response.status_code == 400
    assert response.json() == {"error": "bad proof"}


def test_verify_tampered_proof_is_false_not_error(client):
    body = client.post("/zkp/generate", json={"tx_hash": TX_HASH}).json()
    proof = bytearray.fromhex(body["proof"])
    proof[40] ^= 0x01
    response = client.post(
        "/zkp/verify",
        json={"commitment": body["commitments"][0], "proof": proof.hex()},
    )
    assert response.status_code == 200
    assert response.json() == {"verified": False}


# ==============================================================================
# Plus
# ==============================================================================


def test_prove_and_verify_plus(client):
    response = client.post("/zkp/prove_plus", json={"tx_hash": TX_HASH})
    assert response.status_code == 200
    body = response.json()
    assert len(body["commitments"]) == 1

    response = client.post("/zkp/verify_plus", json=body)
    assert response.status_code == 200
    assert response.json() == {"verified": True}


def test_prove_plus_errors(client):
    response = client.post("/zkp/prove_plus", json={"tx_hash": "0xnothex"})
    assert response.status_code == 400
    assert response.json() == {"error": "bad hex"}

    response = client.post("/zkp/prove_plus", json={"tx_hash": "0x1234"})
    assert response.status_code == 400
    assert response.json() == {"error": "tx_hash too short"}


def test_verify_plus_errors(client):
    response = client.post("/zkp/verify_plus", json={"commitments": ["11"], "proof": "00"})
    assert response.status_code == 400
    assert response.json() == {"error": "bad commitments"}

    response = client.post("/zkp/verify_plus", json={"commitments": ["11" * 32], "proof": "0"})
    assert response.status_code == 400
    assert response.json() == {"error": "bad proof"}


def test_classic_proof_rejected_by_verify_plus(client):
    body = client.post("/zkp/generate", json={"tx_hash": TX_HASH}).json()
    response = client.post("/zkp/verify_plus", json=body)
    # Either a non-canonical scalar under the other curve's encoding, or a failed check
    assert response.status_code in (200, 400)
    if response.status_code == 200:
        assert response.json() == {"verified": False}


# ==============================================================================
# Classic 4-limb
# ==============================================================================


def test_generate_and_verify_bp4(client):
    raw = bytes(range(32))
    response = client.post("/zkp/generate_bp4", json={"tx_hash": raw.hex()})
    assert response.status_code == 200
    body = response.json()
    assert len(body["commitments"]) == 4

    response = client.post("/zkp/verify_bp4", json=body)
    assert response.status_code == 200
    assert response.json() == {"verified": True}


def test_bp4_commitments_open_to_limbs():
    """Each 4-limb commitment opens to the matching little-endian u64 of the hash."""
    raw = bytes(range(32))
    app = create_app(ServerConfig(), random_bytes=random.Random(11).randbytes)
    with TestClient(app) as c:
        body = c.post("/zkp/generate_bp4", json={"tx_hash": raw.hex()}).json()

    # The first four draws of the same seed are the limb blindings.
    replay = random.Random(11).randbytes
    gens = PedersenGens.default(ED25519)
    for i, commitment in enumerate(body["commitments"]):
        limb = int.from_bytes(raw[8 * i:8 * i + 8], "little")
        blinding = ED25519.random_scalar(replay)
        assert commitment == ED25519.encode(gens.commit(limb, blinding)).hex()


def test_bp4_proof_rejected_by_classic_verify(client):
    body = client.post("/zkp/generate_bp4", json={"tx_hash": TX_HASH}).json()
    response = client.post(
        "/zkp/verify",
        json={"commitment": body["commitments"][0], "proof": body["proof"]},
    )
    assert response.status_code == 200
    assert response.json() == {"verified": False}


def test_classic_proof_rejected_by_verify_bp4(client):
    body = client.post("/zkp/generate", json={"tx_hash": TX_HASH}).json()
    response = client.post("/zkp/verify_bp4", json=body)
    assert response.status_code == 200
    assert response.json() == {"verified": False}


def test_generate_bp4_self_check_failure(client, monkeypatch):
    def fail(self, raw):
        raise ProofGenerationSelfCheckFailure("forced")

    monkeypatch.setattr(TxidProofProtocol, "prove_checked", fail)
    response = client.post("/zkp/generate_bp4", json={"tx_hash": TX_HASH})
    assert response.status_code == 500
    assert response.json() == {"error": "proof failed"}


def test_verify_bp4_bad_commitments(client):
    response = client.post(
        "/zkp/verify_bp4",
        json={"commitments": ["11" * 32, "22" * 33], "proof": "00"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "bad commitments"}
