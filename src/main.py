from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.schemas import ErrorResponse
from src.api.routes import router
from src.core.config import get_settings
from src.core.exceptions import (
    AirdropError,
    IntentParseError,
    InvalidAddress,
    RpcExhaustedError,
)

import logging

settings = get_settings()

# Basic console logging configuration
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s  %(levelname)-7s  %(name)-20s │ %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    settings = get_settings()

    logger.info(
        "Starting | env=%s | model=%s | ollama=%s | rpc=%s | commitment=%s",
        settings.ENVIRONMENT,
        settings.OLLAMA_MODEL.value,
        settings.OLLAMA_BASE_URL,
        settings.SOLANA_RPC_URL,
        settings.SOLANA_COMMITMENT.value,
    )

    try:
        yield
    finally:
        logger.info("Shutting down")


app = FastAPI(
    title="Devnet Wallet API",
    description="Wallet balance and airdrop operations, with a natural language endpoint",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


def _error(status_code: int, error: str, exc: Exception, **extra: Any) -> JSONResponse:
    body = ErrorResponse(error=error, message=str(exc), **extra)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(InvalidAddress)
async def invalid_address_handler(request: Request, exc: InvalidAddress):
    return _error(status.HTTP_400_BAD_REQUEST, "invalid_address", exc)


@app.exception_handler(IntentParseError)
async def intent_parse_handler(request: Request, exc: IntentParseError):
    logger.error("Query processing failed on %s: %s", request.url.path, exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "processing_failed", exc)


@app.exception_handler(RpcExhaustedError)
async def rpc_exhausted_handler(request: Request, exc: RpcExhaustedError):
    logger.error("Balance fetch failed on %s: %s", request.url.path, exc)
    return _error(status.HTTP_502_BAD_GATEWAY, "balance_fetch_failed", exc)


@app.exception_handler(AirdropError)
async def airdrop_handler(request: Request, exc: AirdropError):
    logger.error("Airdrop failed at %s: %s", exc.stage.value, exc)
    return _error(
        status.HTTP_502_BAD_GATEWAY,
        "airdrop_failed",
        exc,
        stage=exc.stage.value,
        signature=exc.signature,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "client_ip": request.client.host if request.client else "unknown",
        }
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="internal_error", message="Internal server error").model_dump(
            exclude_none=True),
    )


@app.get("/health", include_in_schema=False)
async def health_check():
    return {"status": "healthy"}
