"""Shared test fixtures for the GlassBox test suite."""

from __future__ import annotations

import base64
import struct
import sys
import os

# Ensure src/ is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest
from datetime import datetime, timezone

MINT = "7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr"
USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


def build_mint_bytes(
    supply: int = 1_000_000_000_000,
    decimals: int = 6,
    *,
    mint_authority: bool = False,
    freeze_authority: bool = False,
    length: int = 82,
) -> bytes:
    """Serialise an SPL Mint account payload."""
    buf = bytearray(max(length, 82))
    struct.pack_into("<I", buf, 0, 1 if mint_authority else 0)
    if mint_authority:
        buf[4:36] = b"\x11" * 32
    struct.pack_into("<Q", buf, 36, supply)
    buf[44] = decimals
    buf[45] = 1
    struct.pack_into("<I", buf, 46, 1 if freeze_authority else 0)
    if freeze_authority:
        buf[50:82] = b"\x22" * 32
    return bytes(buf[:length])


# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def mint_bytes():
    """Factory for Mint account payloads."""
    return build_mint_bytes


@pytest.fixture
def mint_b64():
    def _make(**kwargs) -> str:
        return base64.b64encode(build_mint_bytes(**kwargs)).decode()
    return _make


@pytest.fixture
def largest_accounts():
    """``getTokenLargestAccounts`` value for a 1,000,000-token supply (6 dp)."""
    return [
        {"address": "PooLVau1t1111111111111111111111111111111111", "amount": "450000000000", "uiAmount": 450000.0},
        {"address": "Whale11111111111111111111111111111111111111", "amount": "80000000000", "uiAmount": 80000.0},
        {"address": "Whale22222222222222222222222222222222222222", "amount": "60000000000", "uiAmount": 60000.0},
        {"address": "Insider1111111111111111111111111111111111111", "amount": "20000000000", "uiAmount": 20000.0},
        {"address": "Insider2222222222222222222222222222222222222", "amount": "15000000000", "uiAmount": 15000.0},
        {"address": "Small111111111111111111111111111111111111111", "amount": "5000000000", "uiAmount": 5000.0},
    ]


@pytest.fixture
def sample_pairs():
    """DexScreener ``/token-pairs/v1/solana/{mint}`` response."""
    return [
        {
            "chainId": "solana",
            "dexId": "raydium",
            "pairAddress": "PairA",
            "baseToken": {"address": MINT, "name": "Glass", "symbol": "GLS"},
            "quoteToken": {"address": "So11111111111111111111111111111111111111112", "symbol": "SOL"},
            "priceNative": "0.0000125",
            "priceUsd": "0.0025",
            "txns": {"h24": {"buys": 300, "sells": 200}},
            "volume": {"h24": 250000},
            "liquidity": {"usd": 90000, "base": 450000, "quote": 180},
            "pairCreatedAt": 1_700_000_000_000,
            "info": {
                "imageUrl": "https://example.com/gls.png",
                "websites": [{"label": "Website", "url": "https://glass.example"}],
                "socials": [
                    {"platform": "twitter", "handle": "glasstoken"},
                    {"platform": "telegram", "handle": "glasschat"},
                    {"platform": "tiktok", "handle": "glassclips"},
                ],
            },
        },
        {
            "chainId": "solana",
            "dexId": "orca",
            "pairAddress": "PairB",
            "baseToken": {"address": MINT, "name": "Glass", "symbol": "GLS"},
            "quoteToken": {"address": USDC, "symbol": "USDC"},
            "priceNative": "0.0025",
            "priceUsd": "0.0025",
            "txns": {"h24": {"buys": 10, "sells": 5}},
            "volume": {"h24": 1000},
            "liquidity": {"usd": 12000, "base": 2400000, "quote": 6000},
            "pairCreatedAt": 1_700_100_000_000,
        },
    ]


@pytest.fixture
def fixed_now():
    # 10 days after the first sample pair was created
    return datetime.fromtimestamp(1_700_000_000 + 10 * 86_400, tz=timezone.utc)
