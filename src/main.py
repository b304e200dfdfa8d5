"""
Command line interface for the GlassBox risk engine.

Usage::

    python src/main.py --mint <TOKEN_MINT> [--json] [--verbose]
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

# Ensure ``src/`` is on the import path
sys.path.insert(0, os.path.dirname(__file__))

from glassbox.check_service import DataSourceUnavailable, MintAccountNotFound, check_token
from glassbox.data_sources._clients import close_clients
from glassbox.logging_config import setup_logging
from glassbox.mint_decoder import MalformedAccountData
from glassbox.models import CheckResult
from glassbox.utils import is_valid_mint_address, short_address


def _fmt(value, suffix: str = "", default: str = "n/a") -> str:
    return f"{value}{suffix}" if value is not None else default


def _print_report(result: CheckResult) -> None:
    meta = result.token_meta
    risk = result.risk_summary
    holders = result.holder_summary
    print("=" * 60)
    print("  GlassBox – Risk Report")
    print("=" * 60)
    print(f"  Token        : {meta.name} ({meta.symbol or '?'})  {meta.mint}")
    print(f"  Score        : {risk.score}/100  [{risk.level.upper()} RISK]")
    print(f"  Axes         : mint={risk.mint_score} holders={risk.holder_score} "
          f"liquidity={risk.liquidity_score} age={risk.age_score}")
    print(f"  {risk.blurb}")
    print("-" * 60)
    info = result.mint_info
    print(f"  Mint auth    : {'ACTIVE' if info.has_mint_authority else 'revoked'}")
    print(f"  Freeze auth  : {'ACTIVE' if info.has_freeze_authority else 'revoked'}")
    print(f"  Top 10       : {_fmt(holders.top10_percent, '%')} "
          f"(excl. LP {_fmt(holders.top10_percent_excluding_lp, '%')})")
    lp = holders.lp_holder
    print(f"  LP vault     : {short_address(lp.address) if lp else 'not identified'}")
    print(f"  Holders      : {_fmt(holders.holders_count)}")
    print(f"  Insiders     : {result.insider_summary.insider_wallet_count} wallets, "
          f"{result.insider_summary.total_insider_percent}% "
          f"[{result.insider_summary.risk_level}]")
    print(f"  Clusters     : {result.insider_clusters.note}")
    truth = result.liquidity_truth
    print(f"  Liquidity    : {truth.label} [{truth.level}]")
    print(f"  Age          : {_fmt(round(result.token_age.age_days, 2) if result.token_age else None, ' days')}")
    print(f"  Origin       : {result.origin_hint.label}")
    if result.mayhem_mode.active:
        print(f"  MAYHEM MODE  : {result.mayhem_mode.seconds_remaining}s remaining")
    print("=" * 60)


async def _run(mint: str, as_json: bool) -> int:
    """Async entry point; returns the process exit code."""
    try:
        result = await check_token(mint)
    except MintAccountNotFound:
        print(f"Not a valid SPL mint account: {mint}", file=sys.stderr)
        return 2
    except MalformedAccountData as exc:
        print(f"Malformed mint account: {exc}", file=sys.stderr)
        return 2
    except DataSourceUnavailable as exc:
        print(f"{exc}. Check SOLANA_RPC_ENDPOINT / HELIUS_API_KEY.", file=sys.stderr)
        return 3
    finally:
        await close_clients()

    if as_json:
        print(result.model_dump_json(indent=2))
    else:
        _print_report(result)
    return 0


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Score the rug risk of a Solana token by mint address"
    )
    parser.add_argument(
        "--mint",
        required=True,
        help="Mint address of the token to analyse",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Output result as raw JSON",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    setup_logging(level="DEBUG" if args.verbose else "WARNING")
    mint = args.mint.strip()
    if not is_valid_mint_address(mint):
        parser.error(f"invalid mint address: {mint!r}")
    sys.exit(asyncio.run(_run(mint, args.as_json)))


if __name__ == "__main__":
    main()
