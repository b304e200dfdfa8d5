"""
GlassBox composite risk score.

Four independent axes, each 0-100 (higher = safer):

  - Mint      : both authorities revoked → 95, freeze only → 75,
                mint authority live → 35
  - Holders   : top-10 excl. LP ≤ 25 % and insiders ≤ 30 % → 90,
                ≤ 40 % and ≤ 45 % → 65, else 35; unknown → 50
  - Liquidity : authenticity low → 90, medium → 60, high → 35, unknown → 50
  - Age       : < 6 h → 30, < 2 d → 50, < 14 d → 70, else 85; unknown → 50

Composite = round(0.30·mint + 0.30·holders + 0.25·liquidity + 0.15·age),
half-up, clamped to [0, 100].

Levels:
  ≥ 80 → low
  ≤ 45 → high
  else → medium

Whitelisted centralized stablecoins are forced to ``low`` / 95 after every
axis has been computed.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from config import (
    STABLECOIN_ALLOWLIST,
    WEIGHT_AGE,
    WEIGHT_HOLDERS,
    WEIGHT_LIQUIDITY,
    WEIGHT_MINT,
)
from .constants import SCORE_BLURBS, STABLECOIN_BLURB
from .models import MintRecord, RiskScore

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]

_LIQUIDITY_AXIS = {"low": 90, "medium": 60, "high": 35, "unknown": 50}
_UNKNOWN_AXIS = 50
_LOW_RISK_MIN = 80
_HIGH_RISK_MAX = 45
_STABLECOIN_SCORE = 95
# Mayhem Mode: fresh launches are treated as ultra-new with untrusted liquidity
_MAYHEM_AGE_CAP = 30
_MAYHEM_LIQUIDITY_CAP = 60


def mint_axis(record: MintRecord) -> int:
    if not record.has_mint_authority and not record.has_freeze_authority:
        return 95
    if not record.has_mint_authority:
        return 75
    return 35


def holder_axis(
    top10_excluding_lp: Optional[Number],
    insider_percent: Optional[Number],
) -> int:
    if top10_excluding_lp is None:
        return _UNKNOWN_AXIS
    top10 = Decimal(str(top10_excluding_lp))
    insiders = Decimal(str(insider_percent or 0))
    if top10 <= 25 and insiders <= 30:
        return 90
    if top10 <= 40 and insiders <= 45:
        return 65
    return 35


def liquidity_axis(level: Optional[str], lock_percent: Optional[float] = None) -> int:
    score = _LIQUIDITY_AXIS.get(level or "unknown", _UNKNOWN_AXIS)
    if lock_percent is not None:
        if lock_percent < 50:
            score -= 15
        elif lock_percent < 80:
            score -= 5
    return max(score, 0)


def age_axis(age_days: Optional[float]) -> int:
    if age_days is None:
        return _UNKNOWN_AXIS
    if age_days < 0.25:
        return 30
    if age_days < 2:
        return 50
    if age_days < 14:
        return 70
    return 85


def composite(
    mint_score: int,
    holder_score: int,
    liquidity_score: int,
    age_score: int,
    weights: tuple[float, float, float, float] = (
        WEIGHT_MINT,
        WEIGHT_HOLDERS,
        WEIGHT_LIQUIDITY,
        WEIGHT_AGE,
    ),
) -> int:
    """Weighted sum of the axes, rounded half-up and clamped to [0, 100]."""
    axes = (mint_score, holder_score, liquidity_score, age_score)
    total = sum(
        (Decimal(axis) * Decimal(str(w)) for axis, w in zip(axes, weights)),
        Decimal("0"),
    )
    rounded = int(total.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(100, rounded))


def level_for(score: int) -> str:
    if score >= _LOW_RISK_MIN:
        return "low"
    if score <= _HIGH_RISK_MAX:
        return "high"
    return "medium"


def score_risk(
    mint_record: MintRecord,
    top10_excluding_lp: Optional[Number],
    insider_percent: Optional[Number],
    liquidity_level: Optional[str],
    age_days: Optional[float],
    *,
    mint: Optional[str] = None,
    stablecoins: Collection[str] = STABLECOIN_ALLOWLIST,
    mayhem_active: bool = False,
    lock_percent: Optional[float] = None,
) -> RiskScore:
    """Compute the :class:`RiskScore` for one token.

    Parameters
    ----------
    mint_record:        Decoded mint (authority flags).
    top10_excluding_lp: Top-10 share of supply with the LP removed, or None.
    insider_percent:    Total share of non-LP holders ≥ 1 %.
    liquidity_level:    Liquidity authenticity level (low/medium/high/unknown).
    age_days:           Token age in days, or None when unknown.
    mint:               Mint address, checked against *stablecoins*.
    stablecoins:        Allow-list of centralized stablecoin mints.
    mayhem_active:      Mayhem Mode caps age and liquidity axes.
    lock_percent:       LP lock percentage, when a lock source exists.
    """
    mint_score = mint_axis(mint_record)
    holder_score = holder_axis(top10_excluding_lp, insider_percent)
    liquidity_score = liquidity_axis(liquidity_level, lock_percent)
    age_score = age_axis(age_days)

    if mayhem_active:
        age_score = min(age_score, _MAYHEM_AGE_CAP)
        liquidity_score = min(liquidity_score, _MAYHEM_LIQUIDITY_CAP)

    score = composite(mint_score, holder_score, liquidity_score, age_score)
    level = level_for(score)
    blurb = SCORE_BLURBS[level]
    override = False

    if mint is not None and mint in stablecoins:
        logger.info("Stablecoin override applied for %s", mint)
        score, level, blurb, override = _STABLECOIN_SCORE, "low", STABLECOIN_BLURB, True

    return RiskScore(
        mint_score=mint_score,
        holder_score=holder_score,
        liquidity_score=liquidity_score,
        age_score=age_score,
        score=score,
        level=level,  # type: ignore[arg-type]
        blurb=blurb,
        stablecoin_override=override,
    )
