"""FastAPI application serving the pool program against an in-memory ledger."""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cpamm import __version__
from cpamm.api.endpoints import router
from cpamm.errors import AmmError

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("CPAMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("CPAMM_PORT", "8000"))
DEBUG = os.environ.get("CPAMM_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB); instructions are a few hundred bytes
MAX_REQUEST_SIZE = 1024 * 1024

logger = structlog.get_logger()

app = FastAPI(
    title="Constant-product AMM simulator",
    description="Two-asset liquidity pools over an in-memory ledger",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(AmmError)
async def amm_error_handler(_request: Request, exc: AmmError) -> JSONResponse:
    """Map a rejected operation to HTTP 400 with its top-level kind."""
    return JSONResponse(status_code=400, content={"error": exc.kind, "detail": str(exc)})


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def configure_logging(debug: bool = DEBUG) -> None:
    """Console logging, with debug events when debug is set."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.INFO
        ),
    )


def run() -> None:
    """Run the simulator API server.

    Configuration via environment variables:
    - CPAMM_HOST: Host to bind to (default: 0.0.0.0)
    - CPAMM_PORT: Port to bind to (default: 8000)
    - CPAMM_DEBUG: Enable debug logging and reload mode (default: false)
    - CPAMM_PROGRAM_ID, CPAMM_TOKEN_PROGRAM_ID, CPAMM_PRECISION: see ProgramConfig
    """
    configure_logging()
    logger.info("starting_simulator", host=HOST, port=PORT, debug=DEBUG)
    uvicorn.run(
        "cpamm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
