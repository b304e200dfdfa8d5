"""
Insider snapshot and funding-provenance clustering.

Two views of the non-LP holders:

* **Insider snapshot**: holders ≥ ``INSIDER_PERCENT`` are
  insiders, ≥ ``WHALE_PERCENT`` are whales.
* **Funder clusters**: holders whose recent transactions were paid for by
  the same address.  The per-holder funder sets are inverted into an
  explicit ``funder → {holders}`` adjacency map; any funder linked to two
  or more holders becomes a cluster.

Verdict thresholds (clusters)
-----------------------------
* ``high`` - largest cluster ≥ 25 % of supply OR all clusters ≥ 35 %
* ``medium`` - largest cluster ≥ 10 %
* ``low`` - anything else (including no clusters)

The combined figure counts a holder once per cluster it belongs to, so it
can exceed the disjoint supply those holders own.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Optional

from config import (
    CLUSTER_HIGH_COMBINED_PERCENT,
    CLUSTER_HIGH_LARGEST_PERCENT,
    CLUSTER_MEDIUM_LARGEST_PERCENT,
    INSIDER_HIGH_TOTAL_PERCENT,
    INSIDER_MEDIUM_TOTAL_PERCENT,
    INSIDER_PERCENT,
    WHALE_PERCENT,
    WHALES_HIGH_COUNT,
)
from .holder_distribution import sum_percent
from .models import FunderCluster, HolderRecord, InsiderClusterReport, InsiderSummary

logger = logging.getLogger(__name__)

FundingMap = Mapping[str, Iterable[str]]


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


# ---------------------------------------------------------------------------
# Insider snapshot
# ---------------------------------------------------------------------------

def summarize_insiders(
    non_lp_holders: list[HolderRecord],
    *,
    insider_percent: float = INSIDER_PERCENT,
    whale_percent: float = WHALE_PERCENT,
    high_total_percent: float = INSIDER_HIGH_TOTAL_PERCENT,
    medium_total_percent: float = INSIDER_MEDIUM_TOTAL_PERCENT,
    whales_high: int = WHALES_HIGH_COUNT,
) -> InsiderSummary:
    """Threshold-based concentration snapshot of the non-LP holders."""
    insider_min = _dec(insider_percent)
    whale_min = _dec(whale_percent)

    insiders = [h for h in non_lp_holders if h.percent_of_supply >= insider_min]
    whales = [h for h in non_lp_holders if h.percent_of_supply >= whale_min]
    total = sum_percent(insiders)

    if total > _dec(high_total_percent) or len(whales) >= whales_high:
        level = "high"
        note = (
            "Very high concentration among a few wallets. "
            "Classic rug-pull pattern if they dump."
        )
    elif total > _dec(medium_total_percent) or whales:
        level = "medium"
        note = (
            "Moderate concentration among insiders. "
            f"Watch wallets holding ≥{insider_percent:g}% closely."
        )
    else:
        level = "low"
        note = "No strong insider concentration detected."

    return InsiderSummary(
        insiders=insiders,
        whales=whales,
        total_insider_percent=total,
        largest_insider=insiders[0] if insiders else None,
        insider_wallet_count=len(insiders),
        risk_level=level,  # type: ignore[arg-type]
        note=note,
    )


# ---------------------------------------------------------------------------
# Funder clustering
# ---------------------------------------------------------------------------

def build_funder_graph(
    funding: Optional[FundingMap],
    holder_addresses: Optional[Iterable[str]] = None,
) -> dict[str, list[str]]:
    """Invert ``holder → {funders}`` into ``funder → [holders]``.

    Holders are listed in first-seen order.  When *holder_addresses* is
    given, only those holders are linked.  A holder is never its own funder.
    """
    allowed = set(holder_addresses) if holder_addresses is not None else None
    graph: dict[str, list[str]] = {}
    for holder, funders in (funding or {}).items():
        if allowed is not None and holder not in allowed:
            continue
        for funder in funders or ():
            if not funder or funder == holder:
                continue
            members = graph.setdefault(funder, [])
            if holder not in members:
                members.append(holder)
    return graph


def build_funder_clusters(
    non_lp_holders: list[HolderRecord],
    funding: Optional[FundingMap],
) -> list[FunderCluster]:
    """Group holders by shared funder; singletons are not clusters.

    Sorted by aggregate share descending; equal shares keep funder
    first-seen order.
    """
    by_address = {h.address: h for h in non_lp_holders}
    graph = build_funder_graph(funding, by_address.keys())

    clusters: list[FunderCluster] = []
    for funder, members in graph.items():
        if len(members) < 2:
            continue
        clusters.append(
            FunderCluster(
                funder_address=funder,
                member_addresses=members,
                aggregate_percent=sum_percent(by_address[m] for m in members),
            )
        )
    return sorted(clusters, key=lambda c: c.aggregate_percent, reverse=True)


def classify_clusters(
    clusters: list[FunderCluster],
    *,
    sampled_holders: int = 0,
    high_largest: float = CLUSTER_HIGH_LARGEST_PERCENT,
    high_combined: float = CLUSTER_HIGH_COMBINED_PERCENT,
    medium_largest: float = CLUSTER_MEDIUM_LARGEST_PERCENT,
) -> InsiderClusterReport:
    """Tier the funding clusters and explain the verdict with the numbers."""
    if not clusters:
        return InsiderClusterReport(
            sampled_holders=sampled_holders,
            risk_level="low",
            note="No funding-based clustering detected.",
        )

    largest = clusters[0]
    largest_pct = largest.aggregate_percent
    combined = sum((c.aggregate_percent for c in clusters), Decimal("0"))
    evidence = (
        f"{len(clusters)} funder cluster(s); largest links {largest.size} "
        f"wallets holding {largest_pct}% of supply "
        f"(funder {largest.funder_address}); combined {combined}%."
    )

    if largest_pct >= _dec(high_largest) or combined >= _dec(high_combined):
        level = "high"
        note = f"Strong shared-funder linkage. {evidence}"
    elif largest_pct >= _dec(medium_largest):
        level = "medium"
        note = f"Notable shared-funder linkage. {evidence}"
    else:
        level = "low"
        note = f"Mild linkage, small relative size. {evidence}"

    logger.debug("Funder clusters: %s → %s", evidence, level)
    return InsiderClusterReport(
        clusters=clusters,
        largest_cluster_percent=largest_pct,
        combined_percent=combined,
        sampled_holders=sampled_holders,
        risk_level=level,  # type: ignore[arg-type]
        note=note,
    )


def analyze_insider_clusters(
    non_lp_holders: list[HolderRecord],
    funding: Optional[FundingMap],
) -> InsiderClusterReport:
    """Build and classify funder clusters in one step."""
    clusters = build_funder_clusters(non_lp_holders, funding)
    sampled = sum(1 for h in non_lp_holders if h.address in (funding or {}))
    return classify_clusters(clusters, sampled_holders=sampled)
