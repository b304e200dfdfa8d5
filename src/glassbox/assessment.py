"""
Pure entry point of the risk engine.

``assess`` wires the analysers together from already-fetched inputs:

    mint account ─► MintRecord
    holders ───────► HolderRecords ─► LP identification ─► partition
                                          │
                      ┌───────────────────┴──────────────┐
                      ▼                                  ▼
              HolderSummary / InsiderSummary     funder clusters
    liquidity ────► authenticity verdict
    metadata ─────► origin hint / Mayhem Mode
                      └──────────────► RiskScore

No I/O happens here; identical inputs always give an identical
:class:`TokenAssessment`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from config import STABLECOIN_ALLOWLIST
from .holder_distribution import build_holder_records, summarize_holders
from .insider_clusters import FundingMap, analyze_insider_clusters, summarize_insiders
from .liquidity_truth import classify_liquidity
from .lp_identifier import identify_lp_holder, partition_holders
from .mint_decoder import decode_mint_account, decode_mint_account_b64
from .models import DexMarketStats, LiquidityMetrics, MintRecord, TokenAssessment
from .origin import detect_origin, mayhem_mode, stablecoin_origin
from .risk_scorer import score_risk

logger = logging.getLogger(__name__)

MintInput = Union[MintRecord, bytes, bytearray, memoryview, str]
LiquidityInput = Union[LiquidityMetrics, DexMarketStats, Mapping[str, Any], None]


def _to_mint_record(mint_account: MintInput) -> MintRecord:
    if isinstance(mint_account, MintRecord):
        return mint_account
    if isinstance(mint_account, str):
        return decode_mint_account_b64(mint_account)
    return decode_mint_account(bytes(mint_account))


def _finite(value: Any) -> Optional[float]:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _to_liquidity_metrics(liquidity: LiquidityInput) -> LiquidityMetrics:
    if liquidity is None:
        return LiquidityMetrics()
    if isinstance(liquidity, LiquidityMetrics):
        return liquidity
    if isinstance(liquidity, DexMarketStats):
        return liquidity.to_liquidity_metrics()
    # Loose mappings: anything unreadable counts as missing
    raw = dict(liquidity)
    tx_count = _finite(raw.get("tx_count_24h"))
    if tx_count is not None and not tx_count.is_integer():
        tx_count = None
    return LiquidityMetrics(
        liquidity_usd=_finite(raw.get("liquidity_usd")),
        volume_24h_usd=_finite(raw.get("volume_24h_usd")),
        tx_count_24h=int(tx_count) if tx_count is not None else None,
    )


def assess(
    mint_account: MintInput,
    holders: Optional[Iterable[Any]],
    liquidity_metrics: LiquidityInput,
    funding: Optional[FundingMap] = None,
    token_age_days: Optional[float] = None,
    *,
    mint: Optional[str] = None,
    pool_mint_reserve: Optional[float] = None,
    holders_count: Optional[int] = None,
    token_name: str = "",
    token_symbol: str = "",
    description: str = "",
    dex_id: Optional[str] = None,
    stablecoins: Mapping[str, str] = STABLECOIN_ALLOWLIST,
) -> TokenAssessment:
    """Run every analyser over pre-fetched inputs.

    Raises :class:`MalformedAccountData` when *mint_account* cannot be
    decoded.  Every other missing input degrades the relevant section
    (unknown concentration, unknown liquidity, no clusters) instead of
    failing.

    A :class:`DexMarketStats` also supplies the pool reserve, token age and
    DEX id unless those are passed explicitly.
    """
    record = _to_mint_record(mint_account)
    if isinstance(liquidity_metrics, DexMarketStats):
        if pool_mint_reserve is None:
            pool_mint_reserve = liquidity_metrics.pool_mint_reserve
        if token_age_days is None:
            token_age_days = liquidity_metrics.age_days
        if dex_id is None:
            dex_id = liquidity_metrics.dex_id

    holder_records = build_holder_records(holders or [], record.supply, record.decimals)
    identification = identify_lp_holder(holder_records, pool_mint_reserve)
    partition = partition_holders(holder_records, identification)
    holder_summary = summarize_holders(
        holder_records, partition, identification, holders_count
    )

    insider_summary = summarize_insiders(partition.non_lp_holders)
    clusters = analyze_insider_clusters(partition.non_lp_holders, funding)

    liquidity = classify_liquidity(_to_liquidity_metrics(liquidity_metrics))

    origin = stablecoin_origin(mint, stablecoins) if mint else None
    if origin is None:
        origin = detect_origin(mint or "", token_name, token_symbol, description, dex_id)
    mayhem = mayhem_mode(origin, token_age_days)

    risk = score_risk(
        record,
        holder_summary.top10_percent_excluding_lp,
        insider_summary.total_insider_percent if holder_records else None,
        liquidity.level,
        token_age_days,
        mint=mint,
        stablecoins=stablecoins,
        mayhem_active=mayhem.active,
        lock_percent=liquidity.lock_percent,
    )
    logger.debug(
        "Assessed %s: score=%d level=%s lp=%s",
        mint or "<anonymous>",
        risk.score,
        risk.level,
        identification.kind,
    )

    return TokenAssessment(
        mint_record=record,
        holder_summary=holder_summary,
        insider_summary=insider_summary,
        insider_clusters=clusters,
        liquidity_authenticity=liquidity,
        origin_hint=origin,
        mayhem_mode=mayhem,
        risk_score=risk,
    )
