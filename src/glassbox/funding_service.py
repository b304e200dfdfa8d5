"""
Funding provenance: who paid for a holder's recent transactions?

For each sampled non-LP holder (largest first):

1. ``getSignaturesForAddress(holder, limit=FUNDING_SIGNATURES_PER_HOLDER)``
2. ``getTransaction`` for each signature, keeping the fee payer (first
   signer that is not a known program or the holder itself)

The result maps every sampled holder to its set of funders.  Lookups run
concurrently under a per-call semaphore; a failed lookup contributes an
empty set rather than aborting the trace.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from config import FUNDING_SAMPLE_SIZE, FUNDING_SIGNATURES_PER_HOLDER, MAX_CONCURRENT_RPC
from .data_sources.solana_rpc import SolanaRpcClient
from .models import HolderRecord

logger = logging.getLogger(__name__)


async def _funders_of(
    rpc: SolanaRpcClient,
    holder: str,
    sem: asyncio.Semaphore,
    signatures_per_holder: int,
) -> set[str]:
    async with sem:
        sigs = await rpc.get_signatures_for_address(holder, limit=signatures_per_holder)
    signatures = [s.get("signature") for s in sigs if isinstance(s, dict) and s.get("signature")]
    if not signatures:
        return set()

    async def _payer(sig: str):
        async with sem:
            return await rpc.get_fee_payer(sig)

    payers = await asyncio.gather(*[_payer(s) for s in signatures], return_exceptions=True)
    return {
        p for p in payers
        if isinstance(p, str) and p and p != holder
    }


async def trace_funders(
    rpc: SolanaRpcClient,
    holders: Iterable[HolderRecord],
    *,
    sample_size: int = FUNDING_SAMPLE_SIZE,
    signatures_per_holder: int = FUNDING_SIGNATURES_PER_HOLDER,
    max_concurrency: int = MAX_CONCURRENT_RPC,
) -> dict[str, set[str]]:
    """Return ``holder address → {funder addresses}`` for the sample.

    *holders* should be the non-LP holders sorted by share descending; the
    first *sample_size* are traced.
    """
    sample = [h.address for h in list(holders)[:sample_size]]
    if not sample:
        return {}

    sem = asyncio.Semaphore(max(1, max_concurrency))
    results = await asyncio.gather(
        *[_funders_of(rpc, addr, sem, signatures_per_holder) for addr in sample],
        return_exceptions=True,
    )

    funding: dict[str, set[str]] = {}
    for addr, result in zip(sample, results):
        if isinstance(result, BaseException):
            logger.warning("Funding lookup failed for %s: %s", addr, result)
            funding[addr] = set()
        else:
            funding[addr] = result
    logger.debug(
        "Traced funders for %d holders (%d with at least one funder)",
        len(funding),
        sum(1 for f in funding.values() if f),
    )
    return funding
