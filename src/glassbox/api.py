"""
FastAPI front end for the GlassBox risk engine.

Endpoints
---------
GET  /                  - Redirect to Swagger UI
GET  /health            - Liveness probe
GET  /check?mint=<MINT> - Full risk report for a token

Error mapping for ``/check``:

=====  ==========================================
400    address is not base58 / wrong length
404    no account at the address
422    account data is not an SPL Mint
503    the mint account could not be read
504    the check exceeded ANALYSIS_TIMEOUT_SECONDS
500    anything else (details are only logged)
=====  ==========================================

Requests are rate limited per client IP with slowapi.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from config import (
    ANALYSIS_TIMEOUT_SECONDS,
    API_HOST,
    API_PORT,
    CORS_ORIGINS,
    HTTP_MAX_ATTEMPTS,
    RATE_LIMIT_CHECK,
    SENTRY_DSN,
    SENTRY_ENVIRONMENT,
    SENTRY_TRACES_SAMPLE_RATE,
    SOLANA_RPC_ENDPOINT,
)
from . import __version__
from .check_service import DataSourceUnavailable, MintAccountNotFound, check_token
from .data_sources._clients import close_clients, init_clients
from .logging_config import generate_request_id, request_id_ctx, setup_logging
from .mint_decoder import MalformedAccountData
from .models import CheckResult
from .utils import is_valid_mint_address

setup_logging()
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Sentry
# ---------------------------------------------------------------------------
def _drop_client_errors(event, hint):
    """Sentry ``before_send``: bad addresses and unknown mints are not bugs."""
    exc = (hint.get("exc_info") or (None, None))[1]
    if isinstance(exc, HTTPException) and exc.status_code < 500:
        return None
    return event


if SENTRY_DSN:
    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment=SENTRY_ENVIRONMENT,
        traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=False,
        before_send=_drop_client_errors,
    )
    logger.info("Sentry enabled for %s", SENTRY_ENVIRONMENT)
else:
    logger.info("Sentry disabled (no SENTRY_DSN)")

_start_time = time.monotonic()

# ---------------------------------------------------------------------------
# Rate limiter
# ---------------------------------------------------------------------------
limiter = Limiter(key_func=get_remote_address)


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Validate the RPC endpoint, then own the HTTP clients for the app lifetime."""
    if not SOLANA_RPC_ENDPOINT or not SOLANA_RPC_ENDPOINT.startswith("http"):
        raise RuntimeError(f"SOLANA_RPC_ENDPOINT must be an http(s) URL, got {SOLANA_RPC_ENDPOINT!r}")
    if "helius" not in SOLANA_RPC_ENDPOINT:
        logger.warning("Non-Helius RPC endpoint: token metadata (getAsset) will be missing")

    logger.info("GlassBox %s starting", __version__)
    await init_clients()
    yield
    logger.info("GlassBox shutting down")
    await close_clients()


app = FastAPI(
    title="GlassBox API",
    description="Explainable rug-risk reports for Solana token mints.",
    version=__version__,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["Content-Type", "Accept"],
)


# ---------------------------------------------------------------------------
# Request correlation
# ---------------------------------------------------------------------------
class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id (honouring an incoming X-Request-ID) and log it."""

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("x-request-id") or generate_request_id()
        token = request_id_ctx.set(rid)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = rid
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


app.add_middleware(RequestIdMiddleware)


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------


@app.get("/", tags=["system"], include_in_schema=False)
async def root():
    """Redirect to Swagger UI."""
    return RedirectResponse(url="/docs")


@app.get("/health", tags=["system"])
async def health() -> dict:
    return {
        "status": "ok",
        "version": __version__,
        "uptime_seconds": round(time.monotonic() - _start_time, 1),
        "http_max_attempts": HTTP_MAX_ATTEMPTS,
    }


@app.get("/check", response_model=CheckResult, tags=["check"])
@limiter.limit(RATE_LIMIT_CHECK)
async def get_check(
    request: Request,
    mint: str = Query(..., description="Solana mint address of the token"),
) -> CheckResult:
    """Return the GlassBox risk report for the given token mint."""
    mint = mint.strip()
    if not is_valid_mint_address(mint):
        raise HTTPException(
            status_code=400,
            detail="Invalid mint address: expected a 32-44 character base58 string.",
        )
    try:
        return await asyncio.wait_for(check_token(mint), timeout=ANALYSIS_TIMEOUT_SECONDS)
    except MintAccountNotFound:
        raise HTTPException(status_code=404, detail="Not a valid SPL mint account")
    except MalformedAccountData as exc:
        raise HTTPException(status_code=422, detail=f"Malformed mint account: {exc}")
    except DataSourceUnavailable:
        raise HTTPException(status_code=503, detail="Solana RPC unavailable. Try again.")
    except asyncio.TimeoutError:
        raise HTTPException(
            status_code=504,
            detail=f"Analysis timed out after {ANALYSIS_TIMEOUT_SECONDS}s. Try again.",
        )
    except Exception as exc:
        logger.exception("Check failed for %s", mint)
        raise HTTPException(status_code=500, detail="Internal server error") from exc


# ------------------------------------------------------------------
# Run with: python -m glassbox.api
# ------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "glassbox.api:app",
        host=API_HOST,
        port=API_PORT,
        reload=False,
    )
