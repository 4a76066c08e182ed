"""Pydantic schemas for reputation scoring.

ReputationRecord is the top-level value produced for one scan and the
response body for POST /api/v1/reputation/score. It is assembled fresh per
request and never mutated afterwards.
"""

import enum
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from chainscore.schemas.activity import (
    PolkadotActivity,
    PolkadotActivityInput,
    StellarActivity,
    StellarActivityInput,
)

OVERALL_MAX_SCORE = 1000


class ReputationProfile(str, enum.Enum):
    trader = "Trader"
    governor = "Governor"
    staker = "Staker"
    liquidity_provider = "Liquidity Provider"
    balanced = "Balanced"
    newcomer = "Newcomer"


class ScoreTier(str, enum.Enum):
    excellent = "Excellent"
    good = "Good"
    fair = "Fair"
    building = "Building"
    new = "New"


class ScoreBreakdown(BaseModel):
    """Cross-chain category totals, each on its own fixed ceiling."""

    model_config = ConfigDict(frozen=True)

    transaction_consistency: int = Field(ge=0, le=200)
    governance_participation: int = Field(ge=0, le=250)
    staking_behavior: int = Field(ge=0, le=200)
    liquidity_provision: int = Field(ge=0, le=150)
    account_age: int = Field(ge=0, le=100)
    asset_diversity: int = Field(ge=0, le=100)


class ReputationInsights(BaseModel):
    model_config = ConfigDict(frozen=True)

    profile: ReputationProfile
    confidence: int = Field(ge=0, le=100)
    summary: str
    strengths: tuple[str, ...]
    recommendations: tuple[str, ...]
    red_flags: tuple[str, ...]
    summary_source: Literal["template", "narrator"] = "template"


class ReputationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(ge=0, le=OVERALL_MAX_SCORE)
    score_tier: ScoreTier
    profile: ReputationProfile
    stellar: StellarActivity
    polkadot: PolkadotActivity
    breakdown: ScoreBreakdown
    insights: ReputationInsights
    timestamp: datetime


class ScoreRequest(BaseModel):
    """Request body for scoring already-fetched activity from both chains."""

    stellar: StellarActivityInput
    polkadot: PolkadotActivityInput


class AddressCheck(BaseModel):
    provided: bool
    valid: bool


class AddressValidationResponse(BaseModel):
    stellar: AddressCheck
    polkadot: AddressCheck
    can_scan: bool
