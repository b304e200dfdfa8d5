"""
Centralized constants for the GlassBox risk engine.

This file contains:
- Solana program addresses (immutable protocol constants)
- Account layout sizes
- Fixed labels shared by the classifiers and the scorer

Import from this module rather than duplicating values across modules.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Solana Program Addresses (fixed by the Solana protocol)
# ---------------------------------------------------------------------------

SYSTEM_PROGRAM = "11111111111111111111111111111111"
TOKEN_PROGRAM = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM = "Token2022rMLqfGMQpwkX83CmP5VWMdM8RX8bH6TfpHn"
ATA_PROGRAM = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJe8bv"
COMPUTE_BUDGET = "ComputeBudget111111111111111111111111111111"
MEMO_PROGRAM = "MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr"
WSOL_MINT = "So11111111111111111111111111111111111111112"

# Programs and shared infrastructure accounts that can show up as the
# first signer / fee payer of a transaction but never identify a funder.
NON_FUNDER_ADDRESSES: frozenset[str] = frozenset({
    SYSTEM_PROGRAM,
    TOKEN_PROGRAM,
    TOKEN_2022_PROGRAM,
    ATA_PROGRAM,
    COMPUTE_BUDGET,
    MEMO_PROGRAM,
    WSOL_MINT,
    "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8",    # Raydium AMM V4
    "5Q544fKrFoe6tsEbD7S8EmxGTJYAKtTVhAW5Q5pge4j1",    # Raydium Authority
    "whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc",     # Orca Whirlpool
    "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4",     # Jupiter V6
    "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBymtzbm",    # PumpFun Program
    "TSLvdd1pWpHVjahSpsvCXUbgwsL3JAcvokwaKt1eokM",     # PumpFun Authority
    "LBUZKhRxPF3XUpBCjp4YzTKgLccjZhTSDM9YuVaPwxo",     # Meteora DLMM
    "Eo7WjKq67rjJQSZxS6z3YkapzY3eMj6Xy8X5EkAW7vAo",   # Meteora Pools
})

# ---------------------------------------------------------------------------
# Account layouts
# ---------------------------------------------------------------------------

# Canonical SPL Mint account payload size (bytes)
SPL_MINT_SIZE: int = 82
# SPL Token account size (bytes), used to filter getProgramAccounts
SPL_TOKEN_ACCOUNT_SIZE: int = 165

# ---------------------------------------------------------------------------
# Market
# ---------------------------------------------------------------------------

# Typical AMM swap fee, used to estimate 24h fee revenue from volume
DEX_FEE_RATE: float = 0.003

SECONDS_PER_DAY: int = 86_400

# ---------------------------------------------------------------------------
# Score blurbs (selected deterministically by level)
# ---------------------------------------------------------------------------

SCORE_BLURBS: dict[str, str] = {
    "low": (
        "Mint, holders, liquidity and age all look relatively healthy. "
        "Always DYOR, but this is on the safer side for degen plays."
    ),
    "medium": (
        "Mixed signals across mint, holders, liquidity or age. "
        "Treat this as a degen play and size accordingly."
    ),
    "high": (
        "One or more serious red flags across mint, holders, liquidity or age. "
        "Extreme rug risk."
    ),
}

STABLECOIN_BLURB: str = (
    "Whitelisted centralized stablecoin. Rug-style mint tricks are not the main "
    "risk: concentrated holders and an active freeze authority are expected "
    "for this asset class."
)
