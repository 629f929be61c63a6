import logging
import secrets
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from txid_zkp import __version__
from txid_zkp.api.routes import router
from txid_zkp.config import ServerConfig
from txid_zkp.crypto.groups import RandomBytes
from txid_zkp.errors import TxidProofError

logger = logging.getLogger("txid_zkp.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: ServerConfig = app.state.config
    logger.info(f"txid-zkp {__version__} ready (CORS origins: {', '.join(config.cors_origins)})")
    yield


def create_app(
    config: ServerConfig | None = None,
    random_bytes: RandomBytes = secrets.token_bytes,
) -> FastAPI:
    """
    Build the API application.

    Args:
        config: Server settings; read from the environment when omitted.
        random_bytes: Source of blinding factors and proof nonces. Tests pass
            a seeded source here.
    """
    config = config or ServerConfig.from_env()

    app = FastAPI(
        title="txid-zkp",
        description="Pedersen commitment proofs over transaction identifiers",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.random_bytes = random_bytes

    # Allow CORS for easy frontend integration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.exception_handler(TxidProofError)
    async def txid_proof_error_handler(request: Request, exc: TxidProofError):
        if exc.status_code >= 500:
            logger.error(f"{request.url.path}: {exc}")
        else:
            logger.info(f"{request.url.path} rejected: {exc}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.public_message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Missing or ill-typed fields get the same status as other client errors
        logger.info(f"{request.url.path} rejected: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "invalid request"})

    @app.get("/health")
    async def health_check():
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()


def main() -> None:
    """Entry point for the ``txid-zkp-server`` console script."""
    config = ServerConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
