from fastapi import APIRouter, Request

from txid_zkp.api.models import (
    ProofResponse,
    TxHashRequest,
    VerifyManyRequest,
    VerifyRequest,
    VerifyResponse,
)
from txid_zkp.crypto.groups import RandomBytes
from txid_zkp.zk.codec import decode_tx_hash
from txid_zkp.zk.domains import CLASSIC, CLASSIC_4LIMB, PLUS, TranscriptDomain
from txid_zkp.zk.protocol import TxidProofProtocol
from txid_zkp.zk.serialization import (
    decode_commitment,
    decode_commitments,
    decode_proof,
    encode_bundle,
)

router = APIRouter(prefix="/zkp", tags=["Transaction ID proofs"])


def get_protocol(request: Request, domain: TranscriptDomain) -> TxidProofProtocol:
    """Build a protocol instance using the random source attached to app state."""
    random_bytes: RandomBytes = request.app.state.random_bytes
    return TxidProofProtocol(domain, random_bytes)


# ==============================================================================
# Classic single-scalar
# ==============================================================================


@router.post("/generate", response_model=ProofResponse)
def generate(request: Request, req: TxHashRequest):
    """
    Commit to the transaction hash reduced to one scalar and prove knowledge of the opening.
    """
    raw = decode_tx_hash(req.tx_hash)
    commitments, proof = get_protocol(request, CLASSIC).prove_txid(raw)
    return ProofResponse(**encode_bundle(commitments, proof))


@router.post("/verify", response_model=VerifyResponse)
def verify(request: Request, req: VerifyRequest):
    commitment = decode_commitment(req.commitment)
    proof = decode_proof(req.proof, CLASSIC.group)
    return VerifyResponse(verified=get_protocol(request, CLASSIC).verify([commitment], proof))


# ==============================================================================
# Plus (secp256k1)
# ==============================================================================


@router.post("/prove_plus", response_model=ProofResponse)
def prove_plus(request: Request, req: TxHashRequest):
    raw = decode_tx_hash(req.tx_hash, hex_error="bad hex", length_error="tx_hash too short")
    commitments, proof = get_protocol(request, PLUS).prove_txid(raw)
    return ProofResponse(**encode_bundle(commitments, proof))


@router.post("/verify_plus", response_model=VerifyResponse)
def verify_plus(request: Request, req: VerifyManyRequest):
    commitments = decode_commitments(req.commitments)
    proof = decode_proof(req.proof, PLUS.group)
    return VerifyResponse(verified=get_protocol(request, PLUS).verify(commitments, proof))


# ==============================================================================
# Classic 4-limb
# ==============================================================================


@router.post("/generate_bp4", response_model=ProofResponse)
def generate_bp4(request: Request, req: TxHashRequest):
    """
    Commit to the four little-endian u64 limbs of the transaction hash.

    The proof is verified before it is returned; a failed self-check is a 500.
    """
    raw = decode_tx_hash(req.tx_hash)
    commitments, proof = get_protocol(request, CLASSIC_4LIMB).prove_checked(raw)
    return ProofResponse(**encode_bundle(commitments, proof))


@router.post("/verify_bp4", response_model=VerifyResponse)
def verify_bp4(request: Request, req: VerifyManyRequest):
    commitments = decode_commitments(req.commitments)
    proof = decode_proof(req.proof, CLASSIC_4LIMB.group)
    return VerifyResponse(verified=get_protocol(request, CLASSIC_4LIMB).verify(commitments, proof))
