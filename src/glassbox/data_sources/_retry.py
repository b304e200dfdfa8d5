"""
Shared async HTTP helpers for the data-source clients.

Every read is attempted ``HTTP_MAX_ATTEMPTS`` times (once by default).
When more attempts are allowed, 429 and transient failures back off
exponentially (honouring ``Retry-After``).  Nothing sleeps after the final
attempt.  Exhaustion is reported as ``None``; callers degrade the signal.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional

import httpx

from config import HTTP_MAX_ATTEMPTS

logger = logging.getLogger(__name__)


class _GiveUp(Exception):
    """Non-retryable response; stop immediately."""


def _parse_retry_after(resp: httpx.Response, default: float) -> float:
    """Seconds from an integer ``Retry-After`` header, else *default*."""
    raw = resp.headers.get("retry-after")
    if raw is not None:
        try:
            return max(float(raw), 0.5)
        except (ValueError, TypeError):
            pass
    return default


async def _attempt_loop(
    send: Callable[[], Awaitable[httpx.Response]],
    *,
    max_attempts: int,
    backoff_base: float,
    label: str,
) -> Optional[httpx.Response]:
    """Run *send* until it yields a 2xx response or attempts run out."""
    for attempt in range(max_attempts):
        last = attempt >= max_attempts - 1
        wait = backoff_base * (2 ** attempt)
        try:
            resp = await send()
            if resp.status_code == 429:
                wait = _parse_retry_after(resp, wait)
                logger.warning("%s rate-limited (attempt %d/%d)", label, attempt + 1, max_attempts)
            elif resp.status_code in (401, 403, 404):
                logger.warning("%s HTTP %s – not retrying", label, resp.status_code)
                raise _GiveUp
            else:
                resp.raise_for_status()
                return resp
        except httpx.HTTPStatusError as exc:
            logger.warning("%s HTTP %s", label, exc.response.status_code)
        except httpx.RequestError as exc:
            logger.warning("%s request failed: %s", label, exc)
        except _GiveUp:
            return None
        if last:
            break
        await asyncio.sleep(wait)
    return None


async def async_http_get(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Optional[dict[str, Any]] = None,
    max_attempts: int = HTTP_MAX_ATTEMPTS,
    backoff_base: float = 1.0,
    label: str = "HTTP",
) -> Optional[Any]:
    """GET *url* and return its parsed JSON body, or ``None``."""
    resp = await _attempt_loop(
        lambda: client.get(url, params=params),
        max_attempts=max_attempts,
        backoff_base=backoff_base,
        label=label,
    )
    if resp is None:
        return None
    try:
        return resp.json()
    except ValueError:
        logger.warning("%s returned a non-JSON body", label)
        return None


async def async_http_post_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    json_payload: Any,
    max_attempts: int = HTTP_MAX_ATTEMPTS,
    backoff_base: float = 1.5,
    label: str = "RPC",
) -> Optional[Any]:
    """POST a JSON-RPC *json_payload* and return its ``result``, or ``None``.

    A JSON-RPC ``error`` member is logged and reported as ``None``.
    """
    resp = await _attempt_loop(
        lambda: client.post(url, json=json_payload),
        max_attempts=max_attempts,
        backoff_base=backoff_base,
        label=label,
    )
    if resp is None:
        return None
    try:
        body = resp.json()
    except ValueError:
        logger.warning("%s returned a non-JSON body", label)
        return None
    if isinstance(body, dict) and "error" in body:
        logger.warning("%s error: %s", label, body["error"])
        return None
    return body.get("result") if isinstance(body, dict) else body
