"""Unit tests for Pydantic models."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest
from pydantic import TypeAdapter, ValidationError

from glassbox.models import (
    FunderCluster,
    HolderRecord,
    HolderSummary,
    LiquidityMetrics,
    LPIdentification,
    LPIdentified,
    LPNotFound,
    MintRecord,
    RiskScore,
    TokenAge,
    TokenMeta,
)


class TestMintRecord:

    def test_supply_serialises_as_string(self):
        record = MintRecord(supply=2**64 - 1, decimals=9, has_mint_authority=False, has_freeze_authority=False)
        assert json.loads(record.model_dump_json())["supply"] == "18446744073709551615"
        # Python-mode dumps keep the int
        assert record.model_dump()["supply"] == 2**64 - 1

    def test_frozen(self):
        record = MintRecord(supply=1, decimals=0, has_mint_authority=False, has_freeze_authority=False)
        with pytest.raises(ValidationError):
            record.supply = 2  # type: ignore[misc]

    def test_negative_supply_rejected(self):
        with pytest.raises(ValidationError):
            MintRecord(supply=-1, decimals=0, has_mint_authority=False, has_freeze_authority=False)


class TestHolderRecord:

    def test_json_numbers(self):
        h = HolderRecord(
            address="A",
            raw_amount=123_456_789,
            ui_amount=Decimal("123.456789"),
            percent_of_supply=Decimal("12.34"),
        )
        data = json.loads(h.model_dump_json())
        assert data["raw_amount"] == "123456789"
        assert data["ui_amount"] == "123.456789"
        assert data["percent_of_supply"] == 12.34

    def test_summary_unknown_by_default(self):
        summary = HolderSummary()
        assert summary.top10_percent is None
        assert summary.top10_percent_excluding_lp is None
        assert isinstance(summary.lp_identification, LPNotFound)


class TestLPIdentification:

    def test_discriminated_union(self):
        adapter = TypeAdapter(LPIdentification)
        holder = {"address": "P", "raw_amount": "5", "ui_amount": 5, "percent_of_supply": 50}
        found = adapter.validate_python({"kind": "identified", "holder": holder, "method": "dominance"})
        assert isinstance(found, LPIdentified)
        assert found.holder.raw_amount == 5
        missing = adapter.validate_python({"kind": "not_found", "reason": "No holder data"})
        assert isinstance(missing, LPNotFound)

    def test_bad_method(self):
        with pytest.raises(ValidationError):
            LPIdentified(
                holder=HolderRecord(address="P", raw_amount=1, ui_amount=Decimal(1), percent_of_supply=Decimal(1)),
                method="guess",  # type: ignore[arg-type]
            )


class TestLiquidityMetrics:

    def test_derived_ratios(self):
        m = LiquidityMetrics(liquidity_usd=1_000, volume_24h_usd=5_000, tx_count_24h=50)
        assert m.is_complete
        assert m.trade_to_liquidity_ratio == pytest.approx(5.0)
        assert m.avg_trade_usd == pytest.approx(100.0)
        assert m.model_dump()["trade_to_liquidity_ratio"] == pytest.approx(5.0)

    def test_incomplete(self):
        m = LiquidityMetrics(liquidity_usd=1_000, volume_24h_usd=None, tx_count_24h=50)
        assert not m.is_complete
        assert m.trade_to_liquidity_ratio is None


class TestMisc:

    def test_cluster_needs_two_members(self):
        with pytest.raises(ValidationError):
            FunderCluster(funder_address="F", member_addresses=["a"], aggregate_percent=Decimal("5"))

    def test_score_bounds(self):
        with pytest.raises(ValidationError):
            RiskScore(
                mint_score=95, holder_score=90, liquidity_score=90, age_score=85,
                score=101, level="low", blurb="",
            )

    def test_token_meta_defaults(self):
        meta = TokenMeta(mint="M")
        assert meta.name == "Unknown Token"
        assert meta.logo_uri is None

    def test_token_age_non_negative(self):
        with pytest.raises(ValidationError):
            TokenAge(age_days=-0.5)
