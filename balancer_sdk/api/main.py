"""FastAPI application for the Balancer quoting service."""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from balancer_sdk import __version__
from balancer_sdk.api.endpoints import router
from balancer_sdk.config import get_network_config
from balancer_sdk.errors import BalancerError
from balancer_sdk.math.fixed_point import LogExpMathError
from balancer_sdk.safe_int import SafeIntError

# Configuration from environment variables with sensible defaults
NETWORK = os.environ.get("BALANCER_NETWORK", "mainnet")
HOST = os.environ.get("BALANCER_HOST", "0.0.0.0")
PORT = int(os.environ.get("BALANCER_PORT", "8000"))
DEBUG = os.environ.get("BALANCER_DEBUG", "false").lower() in ("true", "1", "yes")
SUBGRAPH_URL = os.environ.get("BALANCER_SUBGRAPH_URL") or None


def configure_logging(debug: bool = DEBUG) -> None:
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


app = FastAPI(
    title="Balancer SDK (Python)",
    description="Quotes and encodes Balancer V2 joins, exits and pool creation",
    version=__version__,
)
app.state.network_config = get_network_config(NETWORK, SUBGRAPH_URL)


async def _library_error(request: Request, exc: Exception) -> JSONResponse:
    structlog.get_logger().info(
        "request_rejected", path=request.url.path, error=type(exc).__name__, detail=str(exc)
    )
    return JSONResponse(
        status_code=400, content={"detail": str(exc), "error": type(exc).__name__}
    )


for _error in (BalancerError, SafeIntError, LogExpMathError):
    app.add_exception_handler(_error, _library_error)

app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    network = app.state.network_config
    return {
        "status": "ok",
        "network": network.network.name.lower(),
        "chain_id": network.chain_id,
        "subgraph_url": network.subgraph_url,
    }


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - BALANCER_NETWORK: Network name or chain id (default: mainnet)
    - BALANCER_HOST: Host to bind to (default: 0.0.0.0)
    - BALANCER_PORT: Port to bind to (default: 8000)
    - BALANCER_DEBUG: Enable debug logging and reload (default: false)
    - BALANCER_SUBGRAPH_URL: Override the network's subgraph endpoint
    """
    configure_logging(DEBUG)
    uvicorn.run(
        "balancer_sdk.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
