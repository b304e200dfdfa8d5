"""
Solana JSON-RPC client for the GlassBox risk engine.

Uses the standard JSON-RPC interface plus Helius DAS ``getAsset`` for token
metadata.  The public ``api.mainnet-beta.solana.com`` endpoint works for
everything except ``getAsset`` but is heavily rate-limited.

Every method soft-fails: transport or RPC errors are logged by
:mod:`._retry` and surface here as ``None`` / empty values.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..constants import NON_FUNDER_ADDRESSES, SPL_TOKEN_ACCOUNT_SIZE, TOKEN_PROGRAM
from ._retry import async_http_post_json

logger = logging.getLogger(__name__)

_BACKOFF_BASE = 1.5  # seconds


class SolanaRpcClient:
    """Async Solana JSON-RPC client."""

    def __init__(
        self,
        endpoint: str,
        timeout: int = 15,
        *,
        max_attempts: Optional[int] = None,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._client: httpx.AsyncClient | None = None
        self._id_counter = 0

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Mint + holders
    # ------------------------------------------------------------------

    async def get_account_info(self, address: str) -> Optional[dict[str, Any]]:
        """Return the raw ``getAccountInfo`` result (base64 encoded).

        ``None`` means the read itself failed.  A missing account is a
        successful read whose ``value`` is ``None``.
        """
        result = await self._call(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": "confirmed"}],
        )
        return result if isinstance(result, dict) else None

    async def get_token_largest_accounts(
        self, mint: str
    ) -> Optional[list[dict[str, Any]]]:
        """Return up to 20 largest token accounts for *mint*.

        Each entry: ``{"address", "amount" (raw string), "decimals",
        "uiAmount", "uiAmountString"}``.
        """
        result = await self._call(
            "getTokenLargestAccounts", [mint, {"commitment": "confirmed"}]
        )
        if not isinstance(result, dict):
            return None
        value = result.get("value")
        return value if isinstance(value, list) else None

    async def count_token_holders(
        self, mint: str, *, program_id: str = TOKEN_PROGRAM
    ) -> Optional[int]:
        """Count the token accounts of *mint* without downloading their data.

        Many RPC providers disable ``getProgramAccounts`` on the token
        program; ``None`` then means "unknown".
        """
        result = await self._call(
            "getProgramAccounts",
            [
                program_id,
                {
                    "commitment": "confirmed",
                    "encoding": "base64",
                    "dataSlice": {"offset": 0, "length": 0},
                    "filters": [
                        {"dataSize": SPL_TOKEN_ACCOUNT_SIZE},
                        {"memcmp": {"offset": 0, "bytes": mint}},
                    ],
                },
            ],
        )
        return len(result) if isinstance(result, list) else None

    async def get_asset(self, mint: str) -> dict:
        """Fetch Helius DAS asset data for a mint, or ``{}``.

        Relevant response fields::

            result.content.metadata.name / .symbol / .description
            result.content.links.image
        """
        result = await self._call("getAsset", {"id": mint})
        if isinstance(result, dict):
            return result
        return {}

    # ------------------------------------------------------------------
    # Funding provenance
    # ------------------------------------------------------------------

    async def get_signatures_for_address(
        self, address: str, *, limit: int = 5
    ) -> list[dict[str, Any]]:
        """Most recent signatures for *address* (newest first)."""
        result = await self._call(
            "getSignaturesForAddress",
            [address, {"limit": limit, "commitment": "confirmed"}],
        )
        return result if isinstance(result, list) else []

    async def get_transaction(self, signature: str) -> Optional[dict[str, Any]]:
        result = await self._call(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "jsonParsed",
                    "maxSupportedTransactionVersion": 0,
                    "commitment": "confirmed",
                },
            ],
        )
        return result if isinstance(result, dict) else None

    async def get_fee_payer(self, signature: str) -> Optional[str]:
        """Return the first signer of a transaction that is not a program.

        jsonParsed encoding gives ``{pubkey, signer, writable}`` dicts; the
        legacy form is a plain list of addresses where every entry counts
        as a candidate.
        """
        tx = await self.get_transaction(signature)
        if tx is None:
            return None
        account_keys = (
            (tx.get("transaction") or {}).get("message", {}).get("accountKeys") or []
        )
        for key in account_keys:
            if isinstance(key, dict):
                addr = key.get("pubkey", "")
                is_signer = key.get("signer", False)
            else:
                addr, is_signer = key, True
            if addr and is_signer and addr not in NON_FUNDER_ADDRESSES:
                return addr
        return None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _call(self, method: str, params: list[Any] | dict) -> Any:
        """Single JSON-RPC call; ``None`` on any failure."""
        self._id_counter += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._id_counter,
            "method": method,
            "params": params,
        }
        client = await self._get_client()
        kwargs: dict[str, Any] = {}
        if self._max_attempts is not None:
            kwargs["max_attempts"] = self._max_attempts
        return await async_http_post_json(
            client,
            self._endpoint,
            json_payload=payload,
            backoff_base=_BACKOFF_BASE,
            label=f"Solana RPC ({method})",
            **kwargs,
        )
