"""
Holder distribution: exact percent-of-supply for the largest holders.

Percentages are computed in integer basis points (``raw * 10_000 // supply``)
and only then turned into a two-decimal ``Decimal``; nothing on this path
touches a float.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Optional

from .models import (
    HolderEntry,
    HolderPartition,
    HolderRecord,
    HolderSummary,
    LPIdentification,
    LPNotFound,
)

logger = logging.getLogger(__name__)

_TWO_PLACES = Decimal("0.01")
_BASIS_POINTS = 10_000
_TOP_N = 10


def coerce_holder_entry(item: Any) -> Optional[HolderEntry]:
    """Normalise one holder input into a :class:`HolderEntry`.

    Accepted shapes:

    - ``HolderEntry`` → pass-through
    - ``(address, raw_amount)`` or ``(address, raw_amount, ui_amount)``
    - RPC dict ``{"address": ..., "amount": "123", "uiAmount": 0.000123}``

    Returns ``None`` for anything that cannot be read.
    """
    if isinstance(item, HolderEntry):
        return item
    try:
        if isinstance(item, Mapping):
            address = item.get("address") or ""
            amount = int(item.get("amount") or 0)
            ui = item.get("uiAmount", item.get("ui_amount"))
        elif isinstance(item, (tuple, list)) and len(item) >= 2:
            address, amount = str(item[0]), int(item[1])
            ui = item[2] if len(item) > 2 else None
        else:
            return None
        if not address or amount < 0:
            return None
        return HolderEntry(
            address=address,
            amount=amount,
            ui_amount=float(ui) if ui is not None else None,
        )
    except (TypeError, ValueError):
        logger.debug("Skipping unreadable holder entry: %r", item)
        return None


def percent_of_supply(raw_amount: int, supply: int) -> Decimal:
    """Return ``raw_amount / supply`` as a percentage with two decimals.

    A zero supply is a valid (degenerate) mint: every share is ``0.00``.
    """
    if supply <= 0:
        return Decimal("0").quantize(_TWO_PLACES)
    basis_points = raw_amount * _BASIS_POINTS // supply
    return Decimal(basis_points).scaleb(-2).quantize(_TWO_PLACES)


def ui_amount(raw_amount: int, decimals: int) -> Decimal:
    """Return ``raw_amount / 10**decimals`` exactly."""
    return Decimal(raw_amount).scaleb(-decimals)


def build_holder_records(
    entries: Iterable[Any],
    supply: int,
    decimals: int,
) -> list[HolderRecord]:
    """Turn raw holder entries into :class:`HolderRecord` objects.

    The result is sorted by ``percent_of_supply`` descending.  The sort is
    stable: holders with equal shares keep their input order.
    """
    records: list[HolderRecord] = []
    for item in entries or []:
        entry = coerce_holder_entry(item)
        if entry is None:
            continue
        records.append(
            HolderRecord(
                address=entry.address,
                raw_amount=entry.amount,
                ui_amount=ui_amount(entry.amount, decimals),
                percent_of_supply=percent_of_supply(entry.amount, supply),
            )
        )
    return sorted(records, key=lambda h: h.percent_of_supply, reverse=True)


def sum_percent(holders: Iterable[HolderRecord]) -> Decimal:
    return sum((h.percent_of_supply for h in holders), Decimal("0"))


def summarize_holders(
    holders: list[HolderRecord],
    partition: HolderPartition,
    identification: Optional[LPIdentification] = None,
    holders_count: Optional[int] = None,
) -> HolderSummary:
    """Build the top-10 concentration profile, with and without the LP vault.

    With no holder data at all both top-10 figures are ``None`` (unknown),
    never ``0``.
    """
    if identification is None:
        identification = LPNotFound(reason="LP identification not run")

    # Fall back to "at least this many" when the full count is unavailable
    count = holders_count if holders_count is not None else (len(holders) or None)

    if not holders:
        return HolderSummary(
            lp_identification=identification,
            holders_count=count,
        )

    top = holders[:_TOP_N]
    top_excl = partition.non_lp_holders[:_TOP_N]
    return HolderSummary(
        top10_percent=sum_percent(top),
        top_holders=top,
        top10_percent_excluding_lp=sum_percent(top_excl),
        top_holders_excluding_lp=top_excl,
        lp_holder=partition.lp_holder,
        lp_identification=identification,
        holders_count=count,
    )
