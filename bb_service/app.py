"""
bb-service HTTP API

POST /prove and POST /verify hand validated requests to a ProofService;
GET /health reports liveness. Pipeline failures become 500 responses with a
structured body and never take the process down.
"""

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .codec import ProofData
from .config import Settings
from .models import PROVE_USAGE, VERIFY_USAGE, ProveRequest, VerifyRequest
from .pipelines import DefaultProofService, ProofService

logger = structlog.get_logger(__name__)

SERVICE_NAME = "bb-service"
UNKNOWN_ERROR = "Unknown error"


def error_details(exc: Exception) -> str:
    """Human-readable detail for a failure, normalizing messageless errors"""
    return str(exc) or UNKNOWN_ERROR


def get_proof_service(request: Request) -> ProofService:
    return request.app.state.proof_service


def create_app(service: Optional[ProofService] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("bb-service started", bb_path=settings.bb_path, workspace_root=settings.workspace_root)
        yield
        logger.info("bb-service stopped")

    app = FastAPI(
        title="bb-service",
        description="Zero-knowledge proof generation and verification over the Barretenberg CLI",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.proof_service = service or DefaultProofService(settings)

    @app.middleware("http")
    async def access_log_middleware(request, call_next):
        start_time = time.time()
        response = await call_next(request)
        logger.info(
            "Request handled",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration=round(time.time() - start_time, 4),
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        usage = VERIFY_USAGE if request.url.path.rstrip("/").endswith("/verify") else PROVE_USAGE
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        return JSONResponse(status_code=400, content={"error": usage, "details": details})

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": UNKNOWN_ERROR},
        )

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
        }

    @app.post("/prove")
    async def prove(body: ProveRequest, proof_service: ProofService = Depends(get_proof_service)):
        logger.info("Received a request to /prove")
        try:
            proof = await proof_service.generate_proof(body.circuit.to_artifact(), body.input)
            if not isinstance(proof, ProofData):
                proof = ProofData.from_wire(proof)
        except Exception as e:
            logger.error("Error generating proof", error=str(e), error_type=type(e).__name__)
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to generate proof", "details": error_details(e)},
            )
        return {"message": "Proof generated successfully", "proof": proof.to_wire()}

    @app.post("/verify")
    async def verify(body: VerifyRequest, proof_service: ProofService = Depends(get_proof_service)):
        logger.info("Received a request to /verify")
        try:
            is_valid = await proof_service.verify_proof(body.circuit.to_artifact(), body.proof.to_proof_data())
        except Exception as e:
            logger.error("Error verifying proof", error=str(e), error_type=type(e).__name__)
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to verify proof", "details": error_details(e)},
            )
        return {"message": "Proof verification completed", "isValid": bool(is_valid)}

    return app
