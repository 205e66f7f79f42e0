"""Public entrypoint for the BananoMiner dashboard.

Every request goes through one catch-all endpoint. `POST /api` proxies a
wallet lookup to BananoMiner so the browser avoids cross-origin restrictions;
anything else gets the static dashboard page.
"""

import json
from contextlib import asynccontextmanager
from pathlib import Path
from time import perf_counter
from uuid import uuid4

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from bananodash.common.config import settings
from bananodash.common.logging import configure_logging, logger, trace_id_ctx, wallet_ctx
from bananodash.common.metrics import (
    http_request_duration_seconds,
    http_requests_total,
    start_metrics_server,
)
from bananodash.common.routing import ApiProxy, match_route
from bananodash.common.startup import log_startup_config
from bananodash.common.tracing import instrument_app, setup_tracing
from bananodash.services.dashboard.service import MinerStatsClient, UpstreamError

configure_logging()
setup_tracing(settings.service_name)
log_startup_config(
    settings.service_name,
    [
        "SERVICE_NAME",
        "UPSTREAM_BASE_URL",
        "UPSTREAM_USER_AGENT",
        "UPSTREAM_TIMEOUT_SECONDS",
        "METRICS_PORT",
        "TRACING_ENABLED",
    ],
)

DASHBOARD_HTML = (Path(__file__).parent / "static" / "dashboard.html").read_text(encoding="utf-8")
ERROR_BODY = {"error": "Invalid address or network issue."}
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class InvalidRequestBody(ValueError):
    """The `/api` body is not a JSON object."""


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Start the Prometheus scrape server alongside the app when configured."""

    if start_metrics_server(settings.metrics_port):
        logger.info("metrics server listening port=%s", settings.metrics_port)
    yield


# No docs/openapi routes: every path other than POST /api is the dashboard.
app = FastAPI(
    title="BananoMiner Dashboard",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)
instrument_app(app)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Record request count and latency, and propagate the correlation id."""

    start = perf_counter()
    route = match_route(request.method, request.url.path).kind
    method = request.method
    status_code = 500
    trace_id = request.headers.get("x-correlation-id") or str(uuid4())
    trace_id_ctx.set(trace_id)
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers["x-correlation-id"] = trace_id
        return response
    finally:
        elapsed = max(0.0, perf_counter() - start)
        http_request_duration_seconds.labels(
            service=settings.service_name,
            route=route,
            method=method,
        ).observe(elapsed)
        http_requests_total.labels(
            service=settings.service_name,
            route=route,
            method=method,
            status_code=str(status_code),
        ).inc()


def get_stats_client() -> MinerStatsClient:
    """Upstream client built from settings; overridden in tests."""

    return MinerStatsClient(
        base_url=settings.upstream_base_url,
        user_agent=settings.upstream_user_agent,
        timeout=settings.upstream_timeout_seconds,
        service_name=settings.service_name,
    )


async def read_wallet(request: Request) -> str:
    """Extract `wallet` from the JSON body without validating its format.

    Values are spelled as a JavaScript template literal would spell them: a
    missing wallet is `undefined`, `null`/`true`/`false` and numbers keep
    their JSON form, strings pass through untouched.
    """

    try:
        body = await request.json()
    except ValueError as exc:
        raise InvalidRequestBody("request body is not valid JSON") from exc
    if not isinstance(body, dict):
        raise InvalidRequestBody("request body is not a JSON object")
    if "wallet" not in body:
        return "undefined"
    wallet = body["wallet"]
    if isinstance(wallet, str):
        return wallet
    if isinstance(wallet, float) and wallet.is_integer():
        return str(int(wallet))
    return json.dumps(wallet, separators=(",", ":"))


async def proxy_user_address(request: Request, client: MinerStatsClient) -> Response:
    """Relay one BananoMiner lookup, mapping every failure to the same 500 body."""

    try:
        wallet = await read_wallet(request)
    except InvalidRequestBody as exc:
        logger.warning("rejected api body: %s", exc)
        return JSONResponse(status_code=500, content=ERROR_BODY)

    wallet_ctx.set(wallet)
    try:
        payload = await client.fetch_user_address(wallet)
    except UpstreamError as exc:
        logger.warning("user_address lookup failed: %s", exc)
        return JSONResponse(status_code=500, content=ERROR_BODY)

    logger.info("user_address lookup proxied")
    return JSONResponse(status_code=200, content=payload)


def dashboard_page() -> Response:
    return HTMLResponse(DASHBOARD_HTML)


async def handle(request: Request, client: MinerStatsClient) -> Response:
    """Dispatch one request to its route."""

    route = match_route(request.method, request.url.path)
    if isinstance(route, ApiProxy):
        return await proxy_user_address(request, client)
    return dashboard_page()


@app.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
async def dispatch(request: Request, client: MinerStatsClient = Depends(get_stats_client)):
    """Catch-all endpoint; routing is decided by `match_route`."""

    return await handle(request, client)


@app.exception_handler(StarletteHTTPException)
async def unlisted_method_handler(request: Request, exc: StarletteHTTPException):
    """Methods outside `ALL_METHODS` (TRACE, PROPFIND, ...) still get the dashboard."""

    if exc.status_code == 405:
        return dashboard_page()
    return await http_exception_handler(request, exc)
