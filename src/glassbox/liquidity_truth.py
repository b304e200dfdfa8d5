"""
Liquidity authenticity: is the reported volume real?

Wash-traded pools show a huge 24h volume relative to pool depth, produced
by very few trades.  Classification (first match wins, default ``WASH_*``
settings shown):

* ``high`` - volume/liquidity > 100 AND fewer than 50 trades
* ``medium`` - volume/liquidity > 30 AND fewer than 150 trades
* ``low`` - anything else
* ``unknown`` - liquidity, volume or trade count missing / non-positive

``unknown`` is never folded into ``low``.
"""

from __future__ import annotations

from typing import Optional

from config import (
    WASH_FAKE_MAX_TRADES,
    WASH_FAKE_RATIO,
    WASH_SUSPICIOUS_MAX_TRADES,
    WASH_SUSPICIOUS_RATIO,
)
from .models import LiquidityAuthenticity, LiquidityMetrics


def classify_liquidity(
    metrics: Optional[LiquidityMetrics],
    *,
    lock_percent: Optional[float] = None,
) -> LiquidityAuthenticity:
    """Classify *metrics* into a :class:`LiquidityAuthenticity` verdict."""
    metrics = metrics or LiquidityMetrics()

    if not metrics.is_complete:
        return LiquidityAuthenticity(
            level="unknown",
            label="Insufficient data",
            note="Not enough volume / trade data to judge liquidity quality.",
            volume_24h_usd=metrics.volume_24h_usd,
            tx_count_24h=metrics.tx_count_24h,
            lock_percent=lock_percent,
        )

    ratio = metrics.trade_to_liquidity_ratio
    tx_count = metrics.tx_count_24h

    if ratio > WASH_FAKE_RATIO and tx_count < WASH_FAKE_MAX_TRADES:  # type: ignore[operator]
        level, label = "high", "Likely fake / wash"
        note = (
            "24h volume is huge vs liquidity but with very few trades – "
            "classic wash-trading pattern."
        )
    elif ratio > WASH_SUSPICIOUS_RATIO and tx_count < WASH_SUSPICIOUS_MAX_TRADES:  # type: ignore[operator]
        level, label = "medium", "Suspicious"
        note = "Volume is high relative to liquidity with only modest trade count."
    else:
        level, label = "low", "Mostly real"
        note = "Volume and trade count look consistent with liquidity size."

    return LiquidityAuthenticity(
        level=level,  # type: ignore[arg-type]
        label=label,
        note=note,
        trade_to_liquidity=ratio,
        avg_trade_usd=metrics.avg_trade_usd,
        volume_24h_usd=metrics.volume_24h_usd,
        tx_count_24h=tx_count,
        lock_percent=lock_percent,
    )
