"""
Origin hint: best-effort guess of the launchpad or AMM behind a token.

Rules are evaluated in order and the first match wins.  A rule matches on
any of: a mint-address suffix, a keyword in the name / symbol /
description (case-insensitive substring), or the DexScreener ``dexId`` of
the main pool.

Also exposes Mayhem Mode: the first hour of a Mayhem-protocol launch, which
the scorer treats as ultra-fresh.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import NamedTuple, Optional

from config import STABLECOIN_ALLOWLIST
from .constants import SECONDS_PER_DAY
from .models import MayhemMode, OriginHint

MAYHEM_WINDOW_DAYS = 1 / 24

_UNKNOWN = OriginHint(
    key="unknown",
    label="Unknown protocol / origin",
    detail=(
        "Origin could not be confidently determined from mint pattern, "
        "metadata, or pool."
    ),
)


class OriginRule(NamedTuple):
    key: str
    label: str
    detail: str
    mint_suffixes: tuple[str, ...] = ()
    name_words: tuple[str, ...] = ()
    symbol_words: tuple[str, ...] = ()
    desc_words: tuple[str, ...] = ()
    dex_ids: tuple[str, ...] = ()

    def matches(self, mint: str, name: str, symbol: str, desc: str, dex: str) -> bool:
        return (
            any(mint.endswith(s) for s in self.mint_suffixes)
            or any(w in name for w in self.name_words)
            or any(w in symbol for w in self.symbol_words)
            or any(w in desc for w in self.desc_words)
            or dex in self.dex_ids
        )


ORIGIN_RULES: tuple[OriginRule, ...] = (
    OriginRule(
        "pump", "Pump.fun",
        "Token likely minted via Pump.fun or traded primarily on Pump.fun pools. "
        "Pump.fun often locks LP, but always verify LP lock and insiders.",
        mint_suffixes=("pump",), name_words=(" pump", "pump "),
        symbol_words=("pump",), desc_words=("pump.fun",), dex_ids=("pump",),
    ),
    OriginRule(
        "bonk", "Bonk ecosystem",
        "Token appears related to Bonk tooling or branding. "
        "LP and insider distribution still drive risk.",
        mint_suffixes=("bonk",), name_words=("bonk",),
        desc_words=("bonk", "bonkbot"),
    ),
    OriginRule(
        "sugar", "Sugar",
        "Mint or metadata suggests a Sugar-style launch. "
        "LP and insider distribution remain the main safety signals.",
        mint_suffixes=("sugar",), name_words=("sugar",), desc_words=("sugar",),
    ),
    OriginRule(
        "bags", "Bags",
        "Token metadata or mint pattern resembles Bags-style launches. "
        "Check LP and holder spread carefully.",
        mint_suffixes=("bags",), name_words=("bags ",), symbol_words=("bags",),
        desc_words=("bags.fun",),
    ),
    OriginRule(
        "daosfun", "Daos.fun",
        "Likely launched via Daos.fun. Governance/DAO features may apply, "
        "but rug risk still depends on insiders and LP.",
        name_words=("daos ",), symbol_words=("daos",), desc_words=("daos.fun",),
    ),
    OriginRule(
        "believe", "Believe",
        "Branding suggests a Believe-style launch. "
        "LP and insider structure are what matter for safety.",
        mint_suffixes=("blv",), name_words=("believe",), symbol_words=("blv",),
        desc_words=("believe protocol",),
    ),
    OriginRule(
        "boop", "Boop",
        "Name, symbol or mint suffix suggests a Boop-style launch. "
        "Check for concentrated insiders and LP unlock risk.",
        mint_suffixes=("boop",), name_words=("boop",), symbol_words=("boop",),
    ),
    OriginRule(
        "mayhem", "Mayhem Protocol",
        "Token appears linked to Mayhem's high-volatility launch mechanics. "
        "Expect extremely degen early trading conditions.",
        mint_suffixes=("mayhem",), name_words=("mayhem",), desc_words=("mayhem",),
    ),
    OriginRule(
        "moonshot", "Moonshot",
        "Moonshot-style launch. Watch token age and insider activity closely.",
        mint_suffixes=("moonshot",), name_words=("moonshot",),
        desc_words=("moonshot",),
    ),
    OriginRule(
        "candle", "Candle",
        "Token name or mint suggests a Candle-style launch. "
        "Check LP lock and holder distribution.",
        mint_suffixes=("candle",), name_words=("candle",), desc_words=("candle",),
    ),
    OriginRule(
        "heaven", "Heaven",
        "Heaven-style branding detected. "
        "Still a degen launch; treat risk as normal for memes.",
        mint_suffixes=("heaven",), name_words=("heaven",), desc_words=("heaven",),
    ),
    OriginRule(
        "moonit", "Moonit",
        "Looks like a Moonit-style token. Small-cap degen launches require "
        "careful attention to holders and LP safety.",
        mint_suffixes=("moonit", "moont"), name_words=("moonit", "moont"),
        desc_words=("moonit", "moont"),
    ),
    OriginRule(
        "jupiter-studio", "Jupiter Studio",
        "Likely created via Jupiter Studio or associated tools. Origin is more "
        "structured, but LP and insiders still drive risk.",
        name_words=("jupiter studio",), desc_words=("jupiter studio",),
    ),
    OriginRule(
        "launchlab", "LaunchLab",
        "Likely launched via LaunchLab. Fair-launch style does not remove rug "
        "risk from insiders or LP.",
        mint_suffixes=("launchlab",), name_words=("launchlab",),
        desc_words=("launchlab",),
    ),
    OriginRule(
        "wavebreak", "Wavebreak",
        "Branding suggests a Wavebreak-related token. "
        "Always verify LP lock and insider holdings.",
        name_words=("wavebreak",), desc_words=("wavebreak",),
    ),
    OriginRule(
        "dynamic-bc", "Dynamic BC",
        "Token metadata references Dynamic BC. Treat as an experimental launch "
        "style; LP and insiders still drive rug risk.",
        name_words=("dynamic bc",), desc_words=("dynamic bc", "dynamicbc"),
    ),
    # AMMs, matched on the main pool only
    OriginRule(
        "raydium", "Raydium AMM",
        "Primary liquidity pool is on Raydium. LP safety depends on lock/burn "
        "status and who holds the LP tokens.",
        dex_ids=("raydium",),
    ),
    OriginRule(
        "orca", "Orca AMM",
        "Primary liquidity pool is on Orca. "
        "Check LP lock and holder concentration for rug risk.",
        dex_ids=("orca",),
    ),
    OriginRule(
        "meteora", "Meteora AMM",
        "Primary liquidity pool is on Meteora. Dynamic pools can be "
        "capital-efficient but LP unlocks can still rug.",
        dex_ids=("meteora", "meteora-amm-v2", "meteora-amm"),
    ),
    OriginRule(
        "pump-amm", "Pump AMM",
        "Token trades mainly via Pump AMM liquidity. "
        "Verify LP lock/burn and top-holder distribution.",
        dex_ids=("pumpswap",),
    ),
)


def detect_origin(
    mint: str,
    name: str = "",
    symbol: str = "",
    description: str = "",
    dex_id: Optional[str] = None,
    *,
    rules: tuple[OriginRule, ...] = ORIGIN_RULES,
) -> OriginHint:
    """Return the :class:`OriginHint` of the first matching rule."""
    fields = (
        (mint or "").lower(),
        (name or "").lower(),
        (symbol or "").lower(),
        (description or "").lower(),
        (dex_id or "").lower(),
    )
    for rule in rules:
        if rule.matches(*fields):
            return OriginHint(key=rule.key, label=rule.label, detail=rule.detail)
    return _UNKNOWN.model_copy()


def stablecoin_origin(
    mint: str,
    stablecoins: Mapping[str, str] = STABLECOIN_ALLOWLIST,
) -> Optional[OriginHint]:
    """Origin hint for an allow-listed stablecoin, or ``None``."""
    symbol = stablecoins.get(mint)
    if symbol is None:
        return None
    return OriginHint(
        key="stablecoin",
        label=f"{symbol} – centralized stablecoin",
        detail=(
            f"{symbol} on Solana from a known issuer. High holder concentration "
            "and an active freeze authority are normal here."
        ),
    )


def mayhem_mode(origin: OriginHint, age_days: Optional[float]) -> MayhemMode:
    """Mayhem Mode is active during the first hour of a Mayhem launch."""
    if origin.key != "mayhem" or age_days is None or age_days >= MAYHEM_WINDOW_DAYS:
        return MayhemMode()
    remaining = (MAYHEM_WINDOW_DAYS - age_days) * SECONDS_PER_DAY
    return MayhemMode(active=True, seconds_remaining=max(0, int(remaining + 0.5)))
