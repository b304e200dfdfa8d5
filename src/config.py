"""
Project configuration file for the GlassBox token risk engine.

This module centralises all user-modifiable settings such as RPC endpoints,
heuristic thresholds, scoring weights and API options.  You can edit these
values directly or set environment variables to override them.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _parse_float(name: str, default: str, *, low: float = 0.0, high: float = 1.0) -> float:
    """Parse an env var as a float and validate it within [low, high]."""
    raw = os.getenv(name, default)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.error("Invalid value for %s: %r – using default %s", name, raw, default)
        value = float(default)
    if not (low <= value <= high):
        logger.warning("%s=%.4f is outside [%.1f, %.1f] – clamped", name, value, low, high)
        value = max(low, min(value, high))
    return value


def _parse_int(name: str, default: str, *, minimum: int = 1) -> int:
    """Parse an env var as an int and enforce a minimum."""
    raw = os.getenv(name, default)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.error("Invalid value for %s: %r – using default %s", name, raw, default)
        value = int(default)
    if value < minimum:
        logger.warning("%s=%d is below minimum %d – clamped", name, value, minimum)
        value = minimum
    return value


def _parse_stablecoins(raw: str) -> dict[str, str]:
    """Parse ``"mint:SYMBOL,mint2:SYMBOL2"`` into a mint → symbol mapping."""
    result: dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        mint, _, symbol = item.partition(":")
        mint = mint.strip()
        if not mint:
            logger.warning("Ignoring malformed stablecoin entry %r", item)
            continue
        result[mint] = symbol.strip() or "STABLE"
    return result


# ---------------------------------------------------------------------------
# Solana RPC
# ---------------------------------------------------------------------------
HELIUS_API_KEY: str = os.getenv("HELIUS_API_KEY", "")

# An explicit endpoint wins; otherwise Helius (needed for DAS getAsset)
# when a key is configured, else the public mainnet endpoint.
SOLANA_RPC_ENDPOINT: str = os.getenv(
    "SOLANA_RPC_ENDPOINT",
    (
        f"https://mainnet.helius-rpc.com/?api-key={HELIUS_API_KEY}"
        if HELIUS_API_KEY
        else "https://api.mainnet-beta.solana.com"
    ),
)

# ---------------------------------------------------------------------------
# DexScreener
# ---------------------------------------------------------------------------
DEXSCREENER_BASE_URL: str = os.getenv(
    "DEXSCREENER_BASE_URL",
    "https://api.dexscreener.com",
)

# ---------------------------------------------------------------------------
# LP identification
# ---------------------------------------------------------------------------
# Relative distance between a holder balance and the pool reserve reported
# by DexScreener under which the holder is taken to be the pool vault.
LP_RESERVE_TOLERANCE: float = _parse_float("LP_RESERVE_TOLERANCE", "0.20")
# Top holder at or above this % of supply is taken to be the pool when no
# reserve match exists.
LP_DOMINANCE_PERCENT: float = _parse_float(
    "LP_DOMINANCE_PERCENT", "40", low=0.0, high=100.0
)

# ---------------------------------------------------------------------------
# Insider snapshot + funder clustering
# ---------------------------------------------------------------------------
INSIDER_PERCENT: float = _parse_float("INSIDER_PERCENT", "1", low=0.0, high=100.0)
WHALE_PERCENT: float = _parse_float("WHALE_PERCENT", "5", low=0.0, high=100.0)
# Snapshot tiers: combined insider % (strictly above) and whale count.
INSIDER_HIGH_TOTAL_PERCENT: float = _parse_float(
    "INSIDER_HIGH_TOTAL_PERCENT", "60", low=0.0, high=100.0
)
INSIDER_MEDIUM_TOTAL_PERCENT: float = _parse_float(
    "INSIDER_MEDIUM_TOTAL_PERCENT", "35", low=0.0, high=100.0
)
WHALES_HIGH_COUNT: int = _parse_int("WHALES_HIGH_COUNT", "3", minimum=1)

CLUSTER_HIGH_LARGEST_PERCENT: float = _parse_float(
    "CLUSTER_HIGH_LARGEST_PERCENT", "25", low=0.0, high=100.0
)
CLUSTER_HIGH_COMBINED_PERCENT: float = _parse_float(
    "CLUSTER_HIGH_COMBINED_PERCENT", "35", low=0.0, high=1000.0
)
CLUSTER_MEDIUM_LARGEST_PERCENT: float = _parse_float(
    "CLUSTER_MEDIUM_LARGEST_PERCENT", "10", low=0.0, high=100.0
)

# Funding provenance lookups are bounded: N largest non-LP holders, and
# the M most recent signatures per holder.
FUNDING_SAMPLE_SIZE: int = _parse_int("FUNDING_SAMPLE_SIZE", "5", minimum=0)
FUNDING_SIGNATURES_PER_HOLDER: int = _parse_int(
    "FUNDING_SIGNATURES_PER_HOLDER", "5", minimum=1
)

# ---------------------------------------------------------------------------
# Liquidity authenticity (wash trading)
# ---------------------------------------------------------------------------
# volume/liquidity strictly above the ratio AND fewer trades than the cap.
WASH_FAKE_RATIO: float = _parse_float("WASH_FAKE_RATIO", "100", low=0.0, high=1e6)
WASH_FAKE_MAX_TRADES: int = _parse_int("WASH_FAKE_MAX_TRADES", "50", minimum=0)
WASH_SUSPICIOUS_RATIO: float = _parse_float(
    "WASH_SUSPICIOUS_RATIO", "30", low=0.0, high=1e6
)
WASH_SUSPICIOUS_MAX_TRADES: int = _parse_int(
    "WASH_SUSPICIOUS_MAX_TRADES", "150", minimum=0
)

# ---------------------------------------------------------------------------
# Scoring weights  (must sum to 1.0)
# ---------------------------------------------------------------------------
WEIGHT_MINT: float = _parse_float("WEIGHT_MINT", "0.30")
WEIGHT_HOLDERS: float = _parse_float("WEIGHT_HOLDERS", "0.30")
WEIGHT_LIQUIDITY: float = _parse_float("WEIGHT_LIQUIDITY", "0.25")
WEIGHT_AGE: float = _parse_float("WEIGHT_AGE", "0.15")

# Validate scoring weights sum to ~1.0
_weight_sum = WEIGHT_MINT + WEIGHT_HOLDERS + WEIGHT_LIQUIDITY + WEIGHT_AGE
if abs(_weight_sum - 1.0) > 0.01:
    logger.warning(
        "Scoring weights sum to %.4f (expected 1.0). Results may be skewed.",
        _weight_sum,
    )

# ---------------------------------------------------------------------------
# Stablecoin allow-list  (mint → symbol)
# ---------------------------------------------------------------------------
STABLECOIN_ALLOWLIST: dict[str, str] = {
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v": "USDC",
    # Truncated USDC form some wallets copy without the trailing "v"
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1": "USDC",
    "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB": "USDT",
}
STABLECOIN_ALLOWLIST.update(_parse_stablecoins(os.getenv("STABLECOIN_EXTRA_MINTS", "")))

# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------
MAX_CONCURRENT_RPC: int = _parse_int("MAX_CONCURRENT_RPC", "5", minimum=1)
REQUEST_TIMEOUT: int = _parse_int("REQUEST_TIMEOUT", "15", minimum=1)
# Each external read is attempted once unless this is raised.
HTTP_MAX_ATTEMPTS: int = _parse_int("HTTP_MAX_ATTEMPTS", "1", minimum=1)
ANALYSIS_TIMEOUT_SECONDS: int = _parse_int("ANALYSIS_TIMEOUT_SECONDS", "30", minimum=5)

# ---------------------------------------------------------------------------
# Rate limiting (slowapi format, e.g. "10/minute")
# ---------------------------------------------------------------------------
RATE_LIMIT_CHECK: str = os.getenv("RATE_LIMIT_CHECK", "30/minute")

# ---------------------------------------------------------------------------
# Sentry (error tracking)
# ---------------------------------------------------------------------------
SENTRY_DSN: str = os.getenv("SENTRY_DSN", "")
SENTRY_ENVIRONMENT: str = os.getenv("SENTRY_ENVIRONMENT", "production")
SENTRY_TRACES_SAMPLE_RATE: float = _parse_float(
    "SENTRY_TRACES_SAMPLE_RATE", "0.1", low=0.0, high=1.0
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# ---------------------------------------------------------------------------
# API server
# ---------------------------------------------------------------------------
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = _parse_int("API_PORT", "8000", minimum=1)
CORS_ORIGINS: list[str] = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]
