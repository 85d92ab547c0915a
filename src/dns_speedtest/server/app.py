"""
FastAPI application for DNS Speed Test.

Exposes the benchmark as a streaming endpoint plus catalog and
configuration lookups.
"""

import asyncio
import logging
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse

from .. import __version__
from ..config import DEFAULT_DOWNLOAD_DURATION, DEFAULT_DOWNLOAD_URL, DEFAULT_TEST_COUNT
from ..errors import ValidationError
from ..models import RunRequest
from ..output import encode_event
from ..resolvers import DEFAULT_DOMAINS, RESOLVERS
from ..runner import BenchmarkRunner

logger = logging.getLogger(__name__)


def create_app(
    runner_factory: Optional[Callable[[], BenchmarkRunner]] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        runner_factory: Builds the runner for each request
    """
    app = FastAPI(
        title="DNS Speed Test",
        description="DNS resolver latency and throughput benchmarking",
        version=__version__,
    )

    runner_factory = runner_factory or BenchmarkRunner

    # Runs pin the process resolver, so they must never overlap
    run_lock = asyncio.Lock()

    @app.post("/api/dns-test")
    async def dns_test(request: Request):
        """Validate the request, then stream run events as NDJSON."""
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse(
                {"error": "Request body must be valid JSON"}, status_code=400
            )

        try:
            run_request = RunRequest.from_dict(body)
            events = runner_factory().run(run_request)
        except ValidationError as e:
            return JSONResponse({"error": str(e)}, status_code=400)

        async def stream():
            async with run_lock:
                logger.info(
                    "Starting run: %d resolvers, %d domains",
                    len(run_request.resolvers),
                    len(run_request.domains),
                )
                async for event in events:
                    yield encode_event(event)

        return StreamingResponse(
            stream(),
            media_type="application/x-ndjson",
            headers={"Cache-Control": "no-cache"},
        )

    @app.get("/api/resolvers")
    async def get_resolvers():
        """Get the catalog of known resolvers."""
        return {
            "resolvers": [
                {"name": r.name, "ip": r.ip, "website": r.website}
                for r in RESOLVERS
            ],
        }

    @app.get("/api/config")
    async def get_config():
        """Get default request values."""
        return {
            "defaults": {
                "dnsServers": [r.ip for r in RESOLVERS],
                "domains": DEFAULT_DOMAINS,
                "downloadUrl": DEFAULT_DOWNLOAD_URL,
                "testCount": DEFAULT_TEST_COUNT,
                "downloadTestDuration": DEFAULT_DOWNLOAD_DURATION,
                "enableDownloadTest": True,
            }
        }

    return app


def run_server(host: str = "127.0.0.1", port: int = 5000):
    """Run the API server."""
    app = create_app()
    uvicorn.run(app, host=host, port=port, log_level="info")
