"""Integration tests for the FastAPI REST API.

``check_token`` is patched so these tests never touch the network.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient, ASGITransport

from glassbox import assess
from glassbox.api import app
from glassbox.check_service import DataSourceUnavailable, MintAccountNotFound
from glassbox.mint_decoder import MalformedAccountData
from glassbox.models import CheckResult, TokenMeta, TokenMetrics

_MINT = "7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def check_result(mint_bytes):
    a = assess(mint_bytes(supply=2**64 - 1), [("Holder1", 2**63)], None, mint=_MINT)
    return CheckResult(
        token_meta=TokenMeta(mint=_MINT, name="Glass", symbol="GLS"),
        mint_info=a.mint_record,
        holder_summary=a.holder_summary,
        insider_summary=a.insider_summary,
        insider_clusters=a.insider_clusters,
        origin_hint=a.origin_hint,
        mayhem_mode=a.mayhem_mode,
        risk_summary=a.risk_score,
        token_metrics=TokenMetrics(price_usd=0.0025),
        liquidity_truth=a.liquidity_authenticity,
    )


# ------------------------------------------------------------------
# System endpoints
# ------------------------------------------------------------------


@pytest.mark.anyio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert "uptime_seconds" in body
    assert body["http_max_attempts"] >= 1


@pytest.mark.anyio
async def test_root_redirects(client):
    resp = await client.get("/", follow_redirects=False)
    assert resp.status_code == 307
    assert "/docs" in resp.headers.get("location", "")


@pytest.mark.anyio
async def test_request_id_echoed(client):
    resp = await client.get("/health", headers={"x-request-id": "req-42"})
    assert resp.headers["x-request-id"] == "req-42"


@pytest.mark.anyio
async def test_request_id_generated(client):
    resp = await client.get("/health")
    assert len(resp.headers["x-request-id"]) == 12


# ------------------------------------------------------------------
# Check endpoint
# ------------------------------------------------------------------


@pytest.mark.anyio
async def test_check_invalid_mint(client):
    resp = await client.get("/check", params={"mint": "short"})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_check_invalid_characters(client):
    # 0, O, I and l are not base58
    resp = await client.get("/check", params={"mint": "0OIl" * 10})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_check_missing_param(client):
    resp = await client.get("/check")
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_check_ok(client, check_result):
    with patch("glassbox.api.check_token", new_callable=AsyncMock, return_value=check_result) as mock:
        resp = await client.get("/check", params={"mint": f"  {_MINT} "})
    assert resp.status_code == 200
    mock.assert_awaited_once_with(_MINT)
    body = resp.json()
    assert body["token_meta"]["symbol"] == "GLS"
    # Supply beyond 2**53 survives as a string; percentages are numbers
    assert body["mint_info"]["supply"] == str(2**64 - 1)
    assert body["holder_summary"]["top_holders"][0]["percent_of_supply"] == 50.0
    assert body["risk_summary"]["level"] in ("low", "medium", "high")
    assert body["holder_summary"]["lp_identification"]["kind"] == "identified"


@pytest.mark.anyio
@pytest.mark.parametrize(
    "exc, status",
    [
        (MintAccountNotFound(_MINT), 404),
        (MalformedAccountData("Mint account data too short: 40 bytes"), 422),
        (DataSourceUnavailable("rpc down"), 503),
        (asyncio.TimeoutError(), 504),
    ],
)
async def test_check_error_mapping(client, exc, status):
    with patch("glassbox.api.check_token", new_callable=AsyncMock, side_effect=exc):
        resp = await client.get("/check", params={"mint": _MINT})
    assert resp.status_code == status


@pytest.mark.anyio
async def test_check_internal_error_hides_details(client):
    with patch(
        "glassbox.api.check_token",
        new_callable=AsyncMock,
        side_effect=RuntimeError("secret stack detail"),
    ):
        resp = await client.get("/check", params={"mint": _MINT})
    assert resp.status_code == 500
    assert "secret" not in resp.text
    assert resp.json()["detail"] == "Internal server error"
