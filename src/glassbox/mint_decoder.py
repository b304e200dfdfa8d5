"""
SPL Mint account decoder.

Decodes the canonical 82-byte Mint payload returned by ``getAccountInfo``
(base64 encoding) into a :class:`MintRecord`.

Layout (little-endian)::

    [0..4)    u32   mint_authority_option   0 = absent, 1 = present
    [4..36)   32B   mint_authority          (not decoded)
    [36..44)  u64   supply
    [44]      u8    decimals
    [45]      u8    is_initialized          (not decoded)
    [46..50)  u32   freeze_authority_option
    [50..82)  32B   freeze_authority        (not decoded)

The supply is rebuilt from its two u32 halves as ``high * 2**32 + low`` so
that it never passes through a float.
"""

from __future__ import annotations

import base64
import binascii
import struct
from typing import NamedTuple

from .constants import SPL_MINT_SIZE
from .models import MintRecord


class MalformedAccountData(ValueError):
    """Raised when mint account bytes cannot be decoded."""


class LayoutField(NamedTuple):
    name: str
    offset: int
    width: int
    kind: str  # "u8" | "u32" | "u64"


MINT_LAYOUT: tuple[LayoutField, ...] = (
    LayoutField("mint_authority_option", 0, 4, "u32"),
    LayoutField("supply", 36, 8, "u64"),
    LayoutField("decimals", 44, 1, "u8"),
    LayoutField("freeze_authority_option", 46, 4, "u32"),
)


class ByteReader:
    """Bounds-checked little-endian reads over an immutable buffer."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    def __len__(self) -> int:
        return len(self._data)

    def _slice(self, offset: int, width: int) -> bytes:
        if offset < 0 or offset + width > len(self._data):
            raise MalformedAccountData(
                f"read of {width} bytes at offset {offset} exceeds "
                f"buffer of {len(self._data)} bytes"
            )
        return self._data[offset : offset + width]

    def u8(self, offset: int) -> int:
        return self._slice(offset, 1)[0]

    def u32(self, offset: int) -> int:
        return struct.unpack("<I", self._slice(offset, 4))[0]

    def u64(self, offset: int) -> int:
        low = self.u32(offset)
        high = self.u32(offset + 4)
        return high * 2**32 + low

    def read(self, field: LayoutField) -> int:
        if field.kind == "u8":
            return self.u8(field.offset)
        if field.kind == "u32":
            return self.u32(field.offset)
        if field.kind == "u64":
            return self.u64(field.offset)
        raise MalformedAccountData(f"unknown field kind {field.kind!r}")


def decode_mint_account(data: bytes) -> MintRecord:
    """Decode raw Mint account bytes into a :class:`MintRecord`.

    Raises :class:`MalformedAccountData` when fewer than 82 bytes are given.
    Token-2022 mints carry extension data after byte 82; it is ignored.
    """
    if data is None or len(data) < SPL_MINT_SIZE:
        size = 0 if data is None else len(data)
        raise MalformedAccountData(
            f"Mint account data too short: {size} bytes (expected {SPL_MINT_SIZE})"
        )

    reader = ByteReader(data)
    values = {f.name: reader.read(f) for f in MINT_LAYOUT}

    return MintRecord(
        supply=values["supply"],
        decimals=values["decimals"],
        has_mint_authority=values["mint_authority_option"] != 0,
        has_freeze_authority=values["freeze_authority_option"] != 0,
    )


def decode_mint_account_b64(encoded: str) -> MintRecord:
    """Decode the base64 ``data[0]`` string of a ``getAccountInfo`` result."""
    if not encoded:
        raise MalformedAccountData("Missing mint account data")
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedAccountData(f"Mint account data is not valid base64: {exc}") from exc
    return decode_mint_account(raw)
