"""
Shared utilities for the GlassBox risk engine.

- ``is_valid_mint_address`` - base58 shape check for Solana addresses
- ``short_address`` - ``ABCD…WXYZ`` form used in notes and CLI output
- ``parse_datetime`` - tolerant datetime parsing (ISO strings, epoch seconds)
- ``age_days_since`` - age in fractional days, never negative
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from .constants import SECONDS_PER_DAY

# Base58 alphabet (no 0, O, I, l); public keys encode to 32–44 characters
_BASE58_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


def is_valid_mint_address(value: str) -> bool:
    return bool(value) and bool(_BASE58_RE.match(value))


def short_address(address: Optional[str]) -> Optional[str]:
    if not address or len(address) <= 8:
        return address
    return f"{address[:4]}…{address[-4:]}"


def parse_datetime(value: object) -> Optional[datetime]:
    """Convert a value to a timezone-aware ``datetime`` (UTC).

    Accepted inputs:

    - ``None`` → ``None``
    - ``datetime`` → pass-through, with ``tzinfo`` set to UTC if naive
    - ``str`` → ISO-format (``"Z"`` suffix allowed)
    - ``int`` / ``float`` → Unix epoch timestamp in seconds
    - Anything else → ``None``
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value[:-1] + "+00:00" if value.endswith("Z") else value)
        except ValueError:
            return None
        return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (ValueError, OSError, OverflowError):
            return None

    return None


def age_days_since(created: object, now: Optional[datetime] = None) -> Optional[float]:
    """Fractional days between *created* and *now*; ``None`` if unknown or future."""
    created_at = parse_datetime(created)
    if created_at is None:
        return None
    now = now or datetime.now(timezone.utc)
    seconds = (now - created_at).total_seconds()
    if seconds < 0:
        return None
    return seconds / SECONDS_PER_DAY
