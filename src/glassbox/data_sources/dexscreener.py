"""
DexScreener API client for the GlassBox risk engine.

Reference: https://docs.dexscreener.com/api/reference

Public endpoint, no API key required.  The network call lives on
:class:`DexScreenerClient`; turning the pair list into market figures is a
pure function (:func:`pairs_to_market_stats`) so it can be tested without
HTTP.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from ..constants import DEX_FEE_RATE
from ..models import DexMarketStats, SocialLink, Socials
from ..utils import age_days_since, parse_datetime
from ._retry import async_http_get

logger = logging.getLogger(__name__)

_CHAIN_ID = "solana"
_BACKOFF_BASE = 1.0  # seconds
_NAMED_SOCIALS = ("twitter", "telegram", "discord")


class DexScreenerClient:
    """Async wrapper around the DexScreener REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: int = 15,
        *,
        max_attempts: Optional[int] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def get_token_pairs(self, mint: str) -> Optional[list[dict[str, Any]]]:
        """Return all Solana pairs that include *mint*, or ``None`` on failure."""
        url = f"{self._base_url}/token-pairs/v1/{_CHAIN_ID}/{mint}"
        client = await self._get_client()
        kwargs: dict[str, Any] = {}
        if self._max_attempts is not None:
            kwargs["max_attempts"] = self._max_attempts
        data = await async_http_get(
            client, url, backoff_base=_BACKOFF_BASE, label="DexScreener", **kwargs
        )
        if data is None:
            return None
        # The legacy /latest/dex/tokens shape wraps the list in {"pairs": [...]}
        if isinstance(data, dict):
            data = data.get("pairs") or []
        return [p for p in data if isinstance(p, dict)] if isinstance(data, list) else []


# ---------------------------------------------------------------------------
# Conversion helpers (pure data transforms)
# ---------------------------------------------------------------------------

def _safe_float(val: Any) -> Optional[float]:
    """Try to cast *val* to a finite float, returning ``None`` on failure."""
    if val is None:
        return None
    try:
        result = float(val)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _addr(token: Any) -> str:
    return str((token or {}).get("address") or "").lower()


def _price_and_reserve(
    pair: dict[str, Any], mint_lower: str
) -> Optional[tuple[float, Optional[float]]]:
    """USD price of *mint* in *pair* and the pool's reserve of it.

    When the mint is the quote token, DexScreener's ``priceUsd`` is the base
    token's price; dividing by ``priceNative`` converts it.
    """
    liquidity = pair.get("liquidity") or {}
    price_usd = _safe_float(pair.get("priceUsd"))
    if price_usd is None:
        return None
    if _addr(pair.get("baseToken")) == mint_lower:
        return price_usd, _safe_float(liquidity.get("base"))
    if _addr(pair.get("quoteToken")) == mint_lower:
        price_native = _safe_float(pair.get("priceNative"))
        if not price_native:
            return None
        return price_usd / price_native, _safe_float(liquidity.get("quote"))
    return None


def _socials(info: Optional[dict[str, Any]]) -> Optional[Socials]:
    if not info:
        return None
    websites = info.get("websites") if isinstance(info.get("websites"), list) else []
    entries = [
        s for s in (info.get("socials") if isinstance(info.get("socials"), list) else [])
        if isinstance(s, dict) and isinstance(s.get("platform"), str)
    ]

    def handle(platform: str) -> Optional[str]:
        for s in entries:
            if s["platform"].lower() == platform:
                return s.get("handle") or None
        return None

    website = None
    if websites and isinstance(websites[0], dict) and isinstance(websites[0].get("url"), str):
        website = websites[0]["url"]

    twitter, telegram, discord = (handle(p) for p in _NAMED_SOCIALS)
    return Socials(
        website=website,
        twitter=f"https://x.com/{twitter}" if twitter else None,
        telegram=f"https://t.me/{telegram}" if telegram else None,
        discord=f"https://discord.gg/{discord}" if discord else None,
        others=[
            SocialLink(
                platform=s["platform"],
                url=f"https://{s['platform']}.com/{s['handle']}" if s.get("handle") else None,
            )
            for s in entries
            if s["platform"].lower() not in _NAMED_SOCIALS
        ],
    )


def pairs_to_market_stats(
    mint: str,
    pairs: Optional[list[dict[str, Any]]],
    *,
    now: Optional[datetime] = None,
) -> DexMarketStats:
    """Build :class:`DexMarketStats` from the most liquid usable pair.

    A pair is usable when it is on Solana, has a positive USD liquidity,
    and *mint* is its base token or (with a non-zero native price) its
    quote token.  With no usable pair the most liquid pair of any kind is
    used as-is.
    """
    if not pairs:
        return DexMarketStats()

    now = now or datetime.now(timezone.utc)
    mint_lower = mint.lower()

    best: Optional[dict[str, Any]] = None
    best_liq = 0.0
    price: Optional[float] = None
    reserve: Optional[float] = None
    for pair in pairs:
        if pair.get("chainId") != _CHAIN_ID:
            continue
        liq = _safe_float((pair.get("liquidity") or {}).get("usd"))
        if not liq:
            continue
        priced = _price_and_reserve(pair, mint_lower)
        if priced is None:
            continue
        if best is None or liq > best_liq:
            best, best_liq = pair, liq
            price, reserve = priced

    if best is None:
        best = max(pairs, key=lambda p: _safe_float((p.get("liquidity") or {}).get("usd")) or 0)
        liquidity = best.get("liquidity") or {}
        price = _safe_float(best.get("priceUsd"))
        side = "base" if _addr(best.get("baseToken")) == mint_lower else "quote"
        reserve = _safe_float(liquidity.get(side))
        best_liq = _safe_float(liquidity.get("usd"))  # type: ignore[assignment]

    volume = _safe_float((best.get("volume") or {}).get("h24"))
    volume = volume if volume and volume > 0 else None

    txns = (best.get("txns") or {}).get("h24") or {}
    tx_total = int((_safe_float(txns.get("buys")) or 0) + (_safe_float(txns.get("sells")) or 0))

    created_ms = _safe_float(best.get("pairCreatedAt"))
    created_at = parse_datetime(created_ms / 1000) if created_ms and created_ms > 0 else None
    age_days = age_days_since(created_at, now) if created_at is not None else None

    dex_id = best.get("dexId")
    return DexMarketStats(
        price_usd=price,
        liquidity_usd=best_liq,
        pool_mint_reserve=reserve,
        volume_24h_usd=volume,
        tx_count_24h=tx_total or None,
        dex_fees_usd_24h=volume * DEX_FEE_RATE if volume is not None else None,
        pair_created_at=created_at,
        age_days=age_days,
        socials=_socials(best.get("info")),
        dex_id=str(dex_id).lower() if dex_id else None,
    )
