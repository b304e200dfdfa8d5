"""
Token check orchestration.

``check_token(mint)`` performs the network half of a check and hands the
resolved inputs to the pure :func:`~glassbox.assessment.assess`:

1. One concurrent fan-out: mint account, DAS asset, largest accounts,
   DexScreener pairs, holder count.  Each read soft-fails to ``None``.
2. LP exclusion on the holder list, then the funding-provenance
   sub-fan-out over the largest non-LP holders.
3. ``assess`` and assembly of the :class:`CheckResult` payload.

Only the mint account is mandatory.  Missing → :class:`MintAccountNotFound`;
undecodable → :class:`MalformedAccountData`; unreadable →
:class:`DataSourceUnavailable`.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Optional

from config import STABLECOIN_ALLOWLIST
from .assessment import assess
from .data_sources._clients import get_dex_client, get_rpc_client
from .data_sources.dexscreener import DexScreenerClient, pairs_to_market_stats
from .data_sources.solana_rpc import SolanaRpcClient
from .funding_service import trace_funders
from .holder_distribution import build_holder_records
from .logging_config import mint_ctx
from .lp_identifier import identify_lp_holder, partition_holders
from .mint_decoder import decode_mint_account_b64
from .models import CheckResult, DexMarketStats, TokenAge, TokenMeta, TokenMetrics

logger = logging.getLogger(__name__)


class MintAccountNotFound(LookupError):
    """The address has no account, so it cannot be a mint."""


class DataSourceUnavailable(RuntimeError):
    """A mandatory read (the mint account) failed."""


def _account_data(value: dict[str, Any]) -> str:
    data = value.get("data")
    if isinstance(data, list) and data:
        return data[0] or ""
    return data if isinstance(data, str) else ""


def _token_meta(mint: str, asset: Optional[dict[str, Any]]) -> tuple[TokenMeta, str]:
    """Name/symbol/logo from a DAS asset, plus its description."""
    content = (asset or {}).get("content") or {}
    metadata = content.get("metadata") or {}
    links = content.get("links") or {}
    meta = TokenMeta(
        mint=mint,
        name=metadata.get("name") or "Unknown Token",
        symbol=metadata.get("symbol") or "",
        logo_uri=links.get("image") or None,
    )
    return meta, metadata.get("description") or ""


async def _soft(coro: Any, label: str) -> Any:
    """Await *coro*; log and return ``None`` on any failure."""
    try:
        return await coro
    except Exception as exc:
        logger.warning("%s failed: %s", label, exc)
        return None


async def check_token(
    mint: str,
    *,
    rpc: Optional[SolanaRpcClient] = None,
    dex: Optional[DexScreenerClient] = None,
    now: Optional[datetime] = None,
) -> CheckResult:
    """Fetch every signal for *mint* and return the full risk report."""
    rpc = rpc or get_rpc_client()
    dex = dex or get_dex_client()
    token = mint_ctx.set(mint)
    try:
        return await _check(mint, rpc, dex, now)
    finally:
        mint_ctx.reset(token)


async def _check(
    mint: str,
    rpc: SolanaRpcClient,
    dex: DexScreenerClient,
    now: Optional[datetime],
) -> CheckResult:
    logger.info("Checking %s", mint)

    account_info, asset, largest, pairs, holders_count = await asyncio.gather(
        _soft(rpc.get_account_info(mint), "getAccountInfo"),
        _soft(rpc.get_asset(mint), "getAsset"),
        _soft(rpc.get_token_largest_accounts(mint), "getTokenLargestAccounts"),
        _soft(dex.get_token_pairs(mint), "DexScreener pairs"),
        _soft(rpc.count_token_holders(mint), "holder count"),
    )

    if account_info is None:
        raise DataSourceUnavailable(f"Could not read account {mint}")
    value = account_info.get("value")
    if not value:
        raise MintAccountNotFound(mint)

    mint_record = decode_mint_account_b64(_account_data(value))
    market: DexMarketStats = pairs_to_market_stats(mint, pairs, now=now)

    # LP exclusion is needed before funding lookups to pick the sample;
    # assess() repeats it deterministically over the same inputs.
    holders = build_holder_records(largest or [], mint_record.supply, mint_record.decimals)
    partition = partition_holders(
        holders, identify_lp_holder(holders, market.pool_mint_reserve)
    )
    funding = await _soft(
        trace_funders(rpc, partition.non_lp_holders), "funding provenance"
    )

    meta, description = _token_meta(mint, asset)
    assessment = assess(
        mint_record,
        largest or [],
        market,
        funding,
        market.age_days,
        mint=mint,
        pool_mint_reserve=market.pool_mint_reserve,
        holders_count=holders_count,
        token_name=meta.name,
        token_symbol=meta.symbol,
        description=description,
        dex_id=market.dex_id,
    )

    price = market.price_usd
    if mint in STABLECOIN_ALLOWLIST and not price:
        price = 1.0

    logger.info(
        "Checked %s: score=%d (%s)",
        mint,
        assessment.risk_score.score,
        assessment.risk_score.level,
    )
    return CheckResult(
        token_meta=meta,
        mint_info=assessment.mint_record,
        holder_summary=assessment.holder_summary,
        insider_summary=assessment.insider_summary,
        insider_clusters=assessment.insider_clusters,
        origin_hint=assessment.origin_hint,
        mayhem_mode=assessment.mayhem_mode,
        risk_summary=assessment.risk_score,
        token_metrics=TokenMetrics(
            price_usd=price,
            liquidity_usd=market.liquidity_usd,
            dex_fees_usd_24h=market.dex_fees_usd_24h,
        ),
        token_age=TokenAge(age_days=market.age_days) if market.age_days is not None else None,
        liquidity_truth=assessment.liquidity_authenticity,
        socials=market.socials,
    )
