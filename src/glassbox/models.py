"""
Pydantic models used throughout the GlassBox risk engine.

Supply and raw token amounts are Python ``int`` end-to-end and serialise as
decimal strings (they routinely exceed 2**53).  UI amounts are exact
``Decimal`` values emitted as plain decimal strings for the same reason.
Percentages (two places, at most a few hundred) serialise as JSON numbers.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, computed_field

# Exact decimal, emitted as a JSON number
JsonDecimal = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]
# Arbitrary-precision integer, emitted as a decimal string
BigInt = Annotated[int, PlainSerializer(str, return_type=str, when_used="json")]
# Exact decimal of unbounded size, emitted as a plain (non-exponent) string
ExactDecimal = Annotated[
    Decimal,
    PlainSerializer(lambda d: format(d, "f"), return_type=str, when_used="json"),
]

RiskLevel = Literal["low", "medium", "high"]


# ---------------------------------------------------------------------------
# Mint record
# ---------------------------------------------------------------------------
class MintRecord(BaseModel):
    """Decoded SPL Mint account."""

    model_config = ConfigDict(frozen=True)

    supply: BigInt = Field(..., ge=0, description="Raw supply in base units")
    decimals: int = Field(..., ge=0, le=255)
    has_mint_authority: bool
    has_freeze_authority: bool


# ---------------------------------------------------------------------------
# Holders
# ---------------------------------------------------------------------------
class HolderEntry(BaseModel):
    """One entry of the ``getTokenLargestAccounts`` response."""

    address: str
    amount: int = Field(..., ge=0, description="Raw amount in base units")
    ui_amount: Optional[float] = None


class HolderRecord(BaseModel):
    """A token account with its exact share of supply."""

    model_config = ConfigDict(frozen=True)

    address: str
    raw_amount: BigInt = Field(..., ge=0)
    ui_amount: ExactDecimal
    percent_of_supply: JsonDecimal


class LPCandidate(BaseModel):
    """A holder considered during LP identification."""

    holder: HolderRecord
    relative_reserve_difference: JsonDecimal = Field(..., ge=0)


class LPIdentified(BaseModel):
    kind: Literal["identified"] = "identified"
    holder: HolderRecord
    method: Literal["reserve_match", "dominance"]
    relative_reserve_difference: Optional[JsonDecimal] = None


class LPNotFound(BaseModel):
    kind: Literal["not_found"] = "not_found"
    reason: str = ""


LPIdentification = Annotated[
    Union[LPIdentified, LPNotFound], Field(discriminator="kind")
]


class HolderPartition(BaseModel):
    """All holders split into the (optional) LP vault and everyone else."""

    lp_holder: Optional[HolderRecord] = None
    non_lp_holders: list[HolderRecord] = Field(default_factory=list)


class HolderSummary(BaseModel):
    """Concentration profile of the largest holders."""

    top10_percent: Optional[JsonDecimal] = Field(
        None, description="Top-10 share of supply including the LP vault"
    )
    top_holders: list[HolderRecord] = Field(default_factory=list)
    top10_percent_excluding_lp: Optional[JsonDecimal] = Field(
        None, description="Top-10 share of supply with the LP vault removed"
    )
    top_holders_excluding_lp: list[HolderRecord] = Field(default_factory=list)
    lp_holder: Optional[HolderRecord] = None
    lp_identification: LPIdentification = Field(default_factory=LPNotFound)
    holders_count: Optional[int] = Field(
        None, description="Total token accounts, when the RPC could count them"
    )


# ---------------------------------------------------------------------------
# Insiders
# ---------------------------------------------------------------------------
class InsiderSummary(BaseModel):
    """Threshold-based snapshot of large non-LP holders."""

    insiders: list[HolderRecord] = Field(default_factory=list)
    whales: list[HolderRecord] = Field(default_factory=list)
    total_insider_percent: JsonDecimal = Decimal("0")
    largest_insider: Optional[HolderRecord] = None
    insider_wallet_count: int = 0
    risk_level: RiskLevel = "low"
    note: str = ""


class FunderCluster(BaseModel):
    """Holders that share a common funder."""

    model_config = ConfigDict(frozen=True)

    funder_address: str
    member_addresses: list[str] = Field(..., min_length=2)
    aggregate_percent: JsonDecimal

    @property
    def size(self) -> int:
        return len(self.member_addresses)


class InsiderClusterReport(BaseModel):
    """Funding-provenance clusters and their tiered risk."""

    clusters: list[FunderCluster] = Field(default_factory=list)
    largest_cluster_percent: JsonDecimal = Decimal("0")
    combined_percent: JsonDecimal = Decimal("0")
    sampled_holders: int = 0
    risk_level: RiskLevel = "low"
    note: str = ""


# ---------------------------------------------------------------------------
# Liquidity
# ---------------------------------------------------------------------------
class LiquidityMetrics(BaseModel):
    """DEX aggregates; absence is ``None``, never coerced to 0."""

    liquidity_usd: Optional[float] = None
    volume_24h_usd: Optional[float] = None
    tx_count_24h: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return (
            self.liquidity_usd is not None
            and self.liquidity_usd > 0
            and self.volume_24h_usd is not None
            and self.volume_24h_usd > 0
            and self.tx_count_24h is not None
            and self.tx_count_24h > 0
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def trade_to_liquidity_ratio(self) -> Optional[float]:
        if not self.is_complete:
            return None
        return self.volume_24h_usd / self.liquidity_usd  # type: ignore[operator]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def avg_trade_usd(self) -> Optional[float]:
        if not self.is_complete:
            return None
        return self.volume_24h_usd / self.tx_count_24h  # type: ignore[operator]


class LiquidityAuthenticity(BaseModel):
    """Wash-trading verdict for the main pool."""

    level: Literal["low", "medium", "high", "unknown"] = "unknown"
    label: str = "Unknown"
    note: str = ""
    trade_to_liquidity: Optional[float] = None
    avg_trade_usd: Optional[float] = None
    volume_24h_usd: Optional[float] = None
    tx_count_24h: Optional[int] = None
    lock_percent: Optional[float] = Field(None, ge=0.0, le=100.0)


# ---------------------------------------------------------------------------
# Risk score
# ---------------------------------------------------------------------------
class RiskScore(BaseModel):
    """Composite GlassBox score and its four axes."""

    model_config = ConfigDict(frozen=True)

    mint_score: int = Field(..., ge=0, le=100)
    holder_score: int = Field(..., ge=0, le=100)
    liquidity_score: int = Field(..., ge=0, le=100)
    age_score: int = Field(..., ge=0, le=100)
    score: int = Field(..., ge=0, le=100)
    level: RiskLevel
    blurb: str
    stablecoin_override: bool = False


# ---------------------------------------------------------------------------
# Origin
# ---------------------------------------------------------------------------
class OriginHint(BaseModel):
    key: str = "unknown"
    label: str = "Unknown protocol / origin"
    detail: str = ""


class MayhemMode(BaseModel):
    active: bool = False
    seconds_remaining: Optional[int] = None


# ---------------------------------------------------------------------------
# DexScreener market data
# ---------------------------------------------------------------------------
class SocialLink(BaseModel):
    platform: str
    url: Optional[str] = None


class Socials(BaseModel):
    website: Optional[str] = None
    twitter: Optional[str] = None
    telegram: Optional[str] = None
    discord: Optional[str] = None
    others: list[SocialLink] = Field(default_factory=list)


class DexMarketStats(BaseModel):
    """Market figures taken from the most liquid pair of a mint."""

    price_usd: Optional[float] = None
    liquidity_usd: Optional[float] = None
    pool_mint_reserve: Optional[float] = Field(
        None, description="Pool reserve of this mint, in token units"
    )
    volume_24h_usd: Optional[float] = None
    tx_count_24h: Optional[int] = None
    dex_fees_usd_24h: Optional[float] = None
    pair_created_at: Optional[datetime] = None
    age_days: Optional[float] = None
    socials: Optional[Socials] = None
    dex_id: Optional[str] = None

    def to_liquidity_metrics(self) -> LiquidityMetrics:
        return LiquidityMetrics(
            liquidity_usd=self.liquidity_usd,
            volume_24h_usd=self.volume_24h_usd,
            tx_count_24h=self.tx_count_24h,
        )


# ---------------------------------------------------------------------------
# Assessment  (output of the pure ``assess`` entry point)
# ---------------------------------------------------------------------------
class TokenAssessment(BaseModel):
    mint_record: MintRecord
    holder_summary: HolderSummary
    insider_summary: InsiderSummary
    insider_clusters: InsiderClusterReport
    liquidity_authenticity: LiquidityAuthenticity
    origin_hint: OriginHint = Field(default_factory=OriginHint)
    mayhem_mode: MayhemMode = Field(default_factory=MayhemMode)
    risk_score: RiskScore


# ---------------------------------------------------------------------------
# Check result  (the API payload)
# ---------------------------------------------------------------------------
class TokenMeta(BaseModel):
    mint: str
    name: str = "Unknown Token"
    symbol: str = ""
    logo_uri: Optional[str] = None


class TokenMetrics(BaseModel):
    price_usd: Optional[float] = None
    liquidity_usd: Optional[float] = None
    dex_fees_usd_24h: Optional[float] = None


class TokenAge(BaseModel):
    age_days: float = Field(..., ge=0.0)


class CheckResult(BaseModel):
    """Full risk report returned by ``check_token``."""

    token_meta: TokenMeta
    mint_info: MintRecord
    holder_summary: HolderSummary
    insider_summary: InsiderSummary
    insider_clusters: InsiderClusterReport
    origin_hint: OriginHint
    mayhem_mode: MayhemMode
    risk_summary: RiskScore
    token_metrics: TokenMetrics
    token_age: Optional[TokenAge] = None
    liquidity_truth: LiquidityAuthenticity
    socials: Optional[Socials] = None
