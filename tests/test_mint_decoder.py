"""Tests for the SPL Mint account decoder."""

from __future__ import annotations

import base64

import pytest

from glassbox.mint_decoder import (
    MINT_LAYOUT,
    ByteReader,
    MalformedAccountData,
    decode_mint_account,
    decode_mint_account_b64,
)


class TestDecodeMintAccount:

    def test_revoked_authorities(self, mint_bytes):
        record = decode_mint_account(mint_bytes(supply=1_000_000, decimals=6))
        assert record.supply == 1_000_000
        assert record.decimals == 6
        assert record.has_mint_authority is False
        assert record.has_freeze_authority is False

    def test_both_authorities_present(self, mint_bytes):
        record = decode_mint_account(
            mint_bytes(mint_authority=True, freeze_authority=True)
        )
        assert record.has_mint_authority is True
        assert record.has_freeze_authority is True

    def test_freeze_only(self, mint_bytes):
        record = decode_mint_account(mint_bytes(freeze_authority=True))
        assert record.has_mint_authority is False
        assert record.has_freeze_authority is True

    def test_supply_above_float_precision(self, mint_bytes):
        supply = 2**64 - 1
        record = decode_mint_account(mint_bytes(supply=supply, decimals=9))
        assert record.supply == 18_446_744_073_709_551_615
        assert isinstance(record.supply, int)

    def test_supply_just_above_2_53(self, mint_bytes):
        supply = 2**53 + 1
        assert decode_mint_account(mint_bytes(supply=supply)).supply == supply

    def test_nonzero_option_flag_counts_as_present(self, mint_bytes):
        data = bytearray(mint_bytes())
        data[46:50] = (7).to_bytes(4, "little")
        assert decode_mint_account(bytes(data)).has_freeze_authority is True

    def test_token_2022_extension_bytes_ignored(self, mint_bytes):
        data = mint_bytes(supply=42, decimals=0) + b"\x01" * 200
        record = decode_mint_account(data)
        assert record.supply == 42
        assert record.decimals == 0

    def test_too_short_raises(self, mint_bytes):
        with pytest.raises(MalformedAccountData, match="too short"):
            decode_mint_account(mint_bytes(length=81))

    def test_empty_raises(self):
        with pytest.raises(MalformedAccountData):
            decode_mint_account(b"")

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            decode_mint_account(b"\x00" * 10)

    def test_deterministic(self, mint_bytes):
        data = mint_bytes(supply=123456789, decimals=4, mint_authority=True)
        assert decode_mint_account(data) == decode_mint_account(data)


class TestDecodeBase64:

    def test_round_trip_from_rpc_string(self, mint_b64):
        record = decode_mint_account_b64(mint_b64(supply=5_000, decimals=2))
        assert record.supply == 5_000
        assert record.decimals == 2

    def test_missing_data(self):
        with pytest.raises(MalformedAccountData, match="Missing"):
            decode_mint_account_b64("")

    def test_invalid_base64(self):
        with pytest.raises(MalformedAccountData, match="base64"):
            decode_mint_account_b64("not base64 !!")

    def test_short_payload(self):
        encoded = base64.b64encode(b"\x00" * 40).decode()
        with pytest.raises(MalformedAccountData):
            decode_mint_account_b64(encoded)


class TestByteReader:

    def test_layout_offsets(self):
        offsets = {f.name: f.offset for f in MINT_LAYOUT}
        assert offsets == {
            "mint_authority_option": 0,
            "supply": 36,
            "decimals": 44,
            "freeze_authority_option": 46,
        }

    def test_out_of_bounds_read(self):
        reader = ByteReader(b"\x01\x02\x03")
        assert reader.u8(2) == 3
        with pytest.raises(MalformedAccountData):
            reader.u32(0)

    def test_u64_little_endian(self):
        reader = ByteReader((2**40 + 5).to_bytes(8, "little"))
        assert reader.u64(0) == 2**40 + 5
