"""
Singleton HTTP client management for the GlassBox risk engine.

Provides lazily initialised clients for DexScreener and Solana RPC.  The
clients only pool connections; they hold no per-request state.

``init_clients`` / ``close_clients`` should be called at app startup/shutdown.
"""

from __future__ import annotations

import logging
from typing import Optional

from config import DEXSCREENER_BASE_URL, REQUEST_TIMEOUT, SOLANA_RPC_ENDPOINT
from .dexscreener import DexScreenerClient
from .solana_rpc import SolanaRpcClient

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level singletons (created once, reused)
# ---------------------------------------------------------------------------
_dex_client: Optional[DexScreenerClient] = None
_rpc_client: Optional[SolanaRpcClient] = None


def get_dex_client() -> DexScreenerClient:
    global _dex_client
    if _dex_client is None:
        _dex_client = DexScreenerClient(
            base_url=DEXSCREENER_BASE_URL,
            timeout=REQUEST_TIMEOUT,
        )
    return _dex_client


def get_rpc_client() -> SolanaRpcClient:
    global _rpc_client
    if _rpc_client is None:
        _rpc_client = SolanaRpcClient(
            endpoint=SOLANA_RPC_ENDPOINT,
            timeout=REQUEST_TIMEOUT,
        )
    return _rpc_client


async def init_clients() -> None:
    """Eagerly create the singleton HTTP clients (called at startup)."""
    get_dex_client()
    get_rpc_client()
    logger.debug("HTTP clients initialised")


async def close_clients() -> None:
    """Close singleton HTTP clients gracefully (called at shutdown)."""
    global _dex_client, _rpc_client
    if _dex_client is not None:
        await _dex_client.close()
        _dex_client = None
    if _rpc_client is not None:
        await _rpc_client.close()
        _rpc_client = None
