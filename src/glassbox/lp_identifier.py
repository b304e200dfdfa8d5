"""
Liquidity-pool vault identification.

The largest token accounts of a freshly launched mint almost always
include the AMM vault.  It has to be removed before holder concentration
means anything, so we try to find it:

1. **Reserve match**: the holder whose balance is closest to the pool
   reserve DexScreener reports for this mint, within a relative
   tolerance (the two sources are sampled at different times and pools
   drift with fees).
2. **Dominance fallback**: otherwise, a top holder at or above
   ``LP_DOMINANCE_PERCENT`` of supply is assumed to be the vault.
3. Otherwise no LP is identified.  ``LPNotFound`` is distinct from an LP
   holding 0%.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from config import LP_DOMINANCE_PERCENT, LP_RESERVE_TOLERANCE
from .models import (
    HolderPartition,
    HolderRecord,
    LPCandidate,
    LPIdentified,
    LPNotFound,
)

logger = logging.getLogger(__name__)


def _to_decimal(value: Union[float, int, Decimal, str, None]) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def reserve_candidates(
    holders: list[HolderRecord],
    pool_reserve: Decimal,
    tolerance: Decimal,
) -> list[LPCandidate]:
    """Holders whose balance is within *tolerance* of *pool_reserve*.

    Returned in holder order; callers pick the smallest difference.
    """
    candidates: list[LPCandidate] = []
    for holder in holders:
        if holder.ui_amount <= 0:
            continue
        rel = abs(holder.ui_amount - pool_reserve) / pool_reserve
        if rel < tolerance:
            candidates.append(
                LPCandidate(holder=holder, relative_reserve_difference=rel)
            )
    return candidates


def identify_lp_holder(
    holders: list[HolderRecord],
    external_pool_reserve: Union[float, Decimal, None] = None,
    *,
    tolerance: Union[float, Decimal] = LP_RESERVE_TOLERANCE,
    dominance_percent: Union[float, Decimal] = LP_DOMINANCE_PERCENT,
) -> Union[LPIdentified, LPNotFound]:
    """Return which holder (if any) is the AMM liquidity vault.

    *holders* must already be sorted by share descending (as produced by
    :func:`build_holder_records`); ties resolve to the first holder.
    """
    reserve = _to_decimal(external_pool_reserve)
    tol = _to_decimal(tolerance) or Decimal("0")

    if reserve is not None and reserve > 0:
        candidates = reserve_candidates(holders, reserve, tol)
        if candidates:
            # min() keeps the first of equal keys → holder-order tie-break
            best = min(candidates, key=lambda c: c.relative_reserve_difference)
            logger.debug(
                "LP matched by reserve: %s (rel diff %.4f)",
                best.holder.address,
                best.relative_reserve_difference,
            )
            return LPIdentified(
                holder=best.holder,
                method="reserve_match",
                relative_reserve_difference=best.relative_reserve_difference,
            )

    if holders:
        top = holders[0]
        threshold = _to_decimal(dominance_percent)
        if threshold is not None and top.percent_of_supply >= threshold:
            return LPIdentified(holder=top, method="dominance")

    if not holders:
        reason = "No holder data"
    elif reserve is None or reserve <= 0:
        reason = "No pool reserve reported and no dominant holder"
    else:
        reason = "No holder within reserve tolerance and no dominant holder"
    return LPNotFound(reason=reason)


def partition_holders(
    holders: list[HolderRecord],
    identification: Union[LPIdentified, LPNotFound],
) -> HolderPartition:
    """Split *holders* into the LP vault and the remaining holders."""
    if isinstance(identification, LPIdentified):
        lp = identification.holder
        # Exactly one entry is removed even if an address were repeated
        non_lp = list(holders)
        for i, h in enumerate(non_lp):
            if h.address == lp.address:
                del non_lp[i]
                break
        return HolderPartition(lp_holder=lp, non_lp_holders=non_lp)
    return HolderPartition(lp_holder=None, non_lp_holders=list(holders))
