"""FastAPI application for the pool service.

Note: Authentication is not implemented here. The X-Caller header is
trusted as the caller identity; verifying it belongs to the
infrastructure in front of the service.
"""

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from amm_pool import __version__
from amm_pool.api.endpoints import router
from amm_pool.config import ServiceSettings
from amm_pool.errors import (
    InvalidToken,
    PoolError,
    ReentrantCall,
    TransferFailed,
    Unauthorized,
)
from amm_pool.log_config import configure_logging
from amm_pool.models.api import ErrorResponse

logger = structlog.get_logger()

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

# HTTP status per pool error; anything else is a 400
ERROR_STATUS: dict[type[PoolError], int] = {
    Unauthorized: 403,
    InvalidToken: 404,
    ReentrantCall: 409,
    TransferFailed: 502,
}

app = FastAPI(
    title="AMM Pool",
    description="Two-asset constant-product liquidity pool",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(PoolError)
async def pool_error_handler(request: Request, exc: PoolError) -> JSONResponse:
    """Turn a rejected pool operation into a JSON error response."""
    status_code = 400
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            status_code = code
            break

    logger.info(
        "pool_request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        detail=str(exc),
        status_code=status_code,
    )
    body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - AMM_HOST: Host to bind to (default: 0.0.0.0)
    - AMM_PORT: Port to bind to (default: 8000)
    - AMM_DEBUG: Enable debug/reload mode (default: false)
    - AMM_LOG_LEVEL: Log level (default: INFO)
    - AMM_ASSET1, AMM_ASSET2, AMM_AUTHORITY, AMM_POOL_ADDRESS,
      AMM_INITIAL_BALANCE: default pool setup
    """
    settings = ServiceSettings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(
        "amm_pool.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
