"""End-to-end tests for the pure ``assess`` entry point."""

from __future__ import annotations

from decimal import Decimal

import pytest

from glassbox import assess
from glassbox.mint_decoder import MalformedAccountData
from glassbox.models import (
    DexMarketStats,
    LiquidityMetrics,
    LPIdentified,
    LPNotFound,
    MintRecord,
    TokenAssessment,
)

USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
HEALTHY_LIQUIDITY = LiquidityMetrics(liquidity_usd=90_000, volume_24h_usd=250_000, tx_count_24h=500)


class TestAssess:

    def test_full_pipeline(self, mint_bytes, largest_accounts):
        result = assess(
            mint_bytes(supply=10**12, decimals=6),
            largest_accounts,
            HEALTHY_LIQUIDITY,
            funding={
                "Whale11111111111111111111111111111111111111": {"Funder"},
                "Whale22222222222222222222222222222222222222": {"Funder"},
            },
            token_age_days=30,
            mint="GlassMint",
            pool_mint_reserve=450_000,
        )
        assert isinstance(result, TokenAssessment)
        holders = result.holder_summary
        assert isinstance(holders.lp_identification, LPIdentified)
        assert holders.lp_identification.method == "reserve_match"
        assert holders.top10_percent == Decimal("63.00")
        assert holders.top10_percent_excluding_lp == Decimal("18.00")

        assert result.insider_summary.total_insider_percent == Decimal("17.50")
        assert result.insider_summary.risk_level == "medium"

        clusters = result.insider_clusters
        assert clusters.clusters[0].aggregate_percent == Decimal("14.00")
        assert clusters.risk_level == "medium"

        assert result.liquidity_authenticity.level == "low"
        risk = result.risk_score
        assert (risk.mint_score, risk.holder_score, risk.liquidity_score, risk.age_score) == (95, 90, 90, 85)
        assert risk.score == 91
        assert risk.level == "low"

    def test_accepts_base64_and_record(self, mint_b64):
        record = MintRecord(supply=100, decimals=0, has_mint_authority=True, has_freeze_authority=False)
        a = assess(mint_b64(supply=100, decimals=0, mint_authority=True), [], None)
        b = assess(record, [], None)
        assert a == b

    def test_degraded_inputs(self, mint_bytes):
        result = assess(mint_bytes(), None, None)
        assert result.holder_summary.top10_percent_excluding_lp is None
        assert isinstance(result.holder_summary.lp_identification, LPNotFound)
        assert result.liquidity_authenticity.level == "unknown"
        assert result.insider_clusters.clusters == []
        assert result.risk_score.holder_score == 50
        assert result.risk_score.liquidity_score == 50
        assert result.risk_score.age_score == 50

    def test_dominance_fallback_without_reserve(self, mint_bytes, largest_accounts):
        result = assess(mint_bytes(supply=10**12, decimals=6), largest_accounts, None)
        ident = result.holder_summary.lp_identification
        assert ident.method == "dominance"

    def test_market_stats_input(self, mint_bytes):
        stats = DexMarketStats(liquidity_usd=1_000, volume_24h_usd=150_000, tx_count_24h=20)
        assert assess(mint_bytes(), [], stats).liquidity_authenticity.level == "high"

    def test_dict_liquidity_input(self, mint_bytes):
        metrics = {"liquidity_usd": 1_000, "volume_24h_usd": 50_000, "tx_count_24h": 100}
        assert assess(mint_bytes(), [], metrics).liquidity_authenticity.level == "medium"

    def test_malformed_mint_raises(self):
        with pytest.raises(MalformedAccountData):
            assess(b"\x00" * 12, [], None)

    def test_stablecoin(self, mint_bytes):
        result = assess(
            mint_bytes(mint_authority=True, freeze_authority=True),
            [("Treasury", 10**12)],
            None,
            mint=USDC,
        )
        assert result.risk_score.stablecoin_override is True
        assert result.risk_score.score == 95
        assert result.origin_hint.key == "stablecoin"

    def test_mayhem_origin_caps(self, mint_bytes):
        result = assess(
            mint_bytes(),
            [],
            HEALTHY_LIQUIDITY,
            token_age_days=0.01,
            token_name="Mayhem Dog",
        )
        assert result.origin_hint.key == "mayhem"
        assert result.mayhem_mode.active is True
        assert result.risk_score.liquidity_score == 60

    def test_deterministic(self, mint_bytes, largest_accounts):
        args = (mint_bytes(supply=10**12, decimals=6), largest_accounts, HEALTHY_LIQUIDITY)
        assert assess(*args, token_age_days=3) == assess(*args, token_age_days=3)

    def test_json_payload(self, mint_bytes):
        result = assess(mint_bytes(supply=2**64 - 1), [("A", 2**63)], None)
        payload = result.model_dump(mode="json")
        assert payload["mint_record"]["supply"] == "18446744073709551615"
        assert payload["holder_summary"]["top_holders"][0]["raw_amount"] == str(2**63)
        assert payload["holder_summary"]["top_holders"][0]["percent_of_supply"] == 50.0

    def test_json_ui_amount_is_exact_above_float_precision(self, mint_bytes):
        raw = 2**60 + 1
        result = assess(mint_bytes(supply=2**64 - 1, decimals=0), [("A", raw)], None)
        holder = result.model_dump(mode="json")["holder_summary"]["top_holders"][0]
        assert holder["ui_amount"] == "1152921504606846977"
        assert Decimal(holder["ui_amount"]) == raw

        tiny = assess(mint_bytes(supply=10**12, decimals=9), [("B", 1)], None)
        holder = tiny.model_dump(mode="json")["holder_summary"]["top_holders"][0]
        assert holder["ui_amount"] == "0.000000001"


class TestMarketStatsInputs:

    POOL_HOLDERS = [("Pool", 300_000), ("A", 200_000), ("B", 100_000)]

    def _stats(self, **overrides):
        fields = dict(
            liquidity_usd=90_000,
            volume_24h_usd=250_000,
            tx_count_24h=500,
            pool_mint_reserve=300_000,
            age_days=30,
            dex_id="raydium",
        )
        fields.update(overrides)
        return DexMarketStats(**fields)

    def test_reserve_and_age_taken_from_stats(self, mint_bytes):
        result = assess(mint_bytes(supply=1_000_000, decimals=0), self.POOL_HOLDERS, self._stats())
        ident = result.holder_summary.lp_identification
        assert isinstance(ident, LPIdentified)
        assert ident.method == "reserve_match"
        assert ident.holder.address == "Pool"
        assert result.holder_summary.top10_percent_excluding_lp == Decimal("30.00")
        assert result.risk_score.age_score == 85
        assert result.origin_hint.key == "raydium"

    def test_explicit_arguments_win(self, mint_bytes):
        result = assess(
            mint_bytes(supply=1_000_000, decimals=0),
            self.POOL_HOLDERS,
            self._stats(),
            token_age_days=1,
            pool_mint_reserve=200_000,
        )
        assert result.holder_summary.lp_identification.holder.address == "A"
        assert result.risk_score.age_score == 50

    def test_stats_without_reserve_or_age(self, mint_bytes):
        stats = self._stats(pool_mint_reserve=None, age_days=None)
        result = assess(mint_bytes(supply=1_000_000, decimals=0), self.POOL_HOLDERS, stats)
        assert isinstance(result.holder_summary.lp_identification, LPNotFound)
        assert result.risk_score.age_score == 50


class TestLooseLiquidityMapping:

    @pytest.mark.parametrize(
        "metrics",
        [
            {"liquidity_usd": 1_000, "volume_24h_usd": 50_000, "tx_count_24h": 80.5},
            {"liquidity_usd": "n/a", "volume_24h_usd": 50_000, "tx_count_24h": 80},
            {"liquidity_usd": 1_000, "volume_24h_usd": float("nan"), "tx_count_24h": 80},
            {"liquidity_usd": 1_000, "tx_count_24h": [80]},
        ],
    )
    def test_unreadable_figures_are_unknown(self, mint_bytes, metrics):
        result = assess(mint_bytes(), [], metrics)
        assert result.liquidity_authenticity.level == "unknown"
        assert result.risk_score.liquidity_score == 50

    def test_whole_float_and_string_counts_accepted(self, mint_bytes):
        metrics = {"liquidity_usd": "1000", "volume_24h_usd": 50_000.0, "tx_count_24h": 100.0}
        result = assess(mint_bytes(), [], metrics)
        assert result.liquidity_authenticity.level == "medium"
        assert result.liquidity_authenticity.tx_count_24h == 100
