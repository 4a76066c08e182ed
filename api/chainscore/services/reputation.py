"""Reputation record assembly and concurrent two-chain scans.

Numeric scoring (chain scores, overall score, breakdown) is synchronous and
needs nothing but the two activity inputs. Insight narration is the only
step that may await an external service. Chain data fetching is not done
here: scan_reputation() takes fetcher callables supplied by the caller,
runs them concurrently and lets any fetch error propagate before the engine
runs, so a record is either complete or never built.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone

import structlog

from chainscore.metrics import reputation_records
from chainscore.schemas.activity import (
    PolkadotActivity,
    PolkadotActivityInput,
    StellarActivity,
    StellarActivityInput,
)
from chainscore.schemas.reputation import (
    ReputationInsights,
    ReputationRecord,
    ScoreBreakdown,
    ScoreTier,
)
from chainscore.services.breakdown import calculate_score_breakdown
from chainscore.services.insights import (
    DEFAULT_NARRATION_TIMEOUT,
    build_insights,
    generate_insights,
)
from chainscore.services.narrative import InsightNarrator
from chainscore.services.scoring import (
    calculate_overall_score,
    calculate_polkadot_score,
    calculate_stellar_score,
)

log = structlog.get_logger(__name__)

StellarFetcher = Callable[[str], Awaitable[StellarActivityInput]]
PolkadotFetcher = Callable[[str], Awaitable[PolkadotActivityInput]]

# Lower bound of each tier, highest first
SCORE_TIERS: list[tuple[int, ScoreTier]] = [
    (800, ScoreTier.excellent),
    (600, ScoreTier.good),
    (400, ScoreTier.fair),
    (200, ScoreTier.building),
    (0, ScoreTier.new),
]


@dataclass(frozen=True)
class ScoredActivities:
    stellar: StellarActivity
    polkadot: PolkadotActivity
    overall_score: int
    breakdown: ScoreBreakdown


def score_tier(overall_score: int) -> ScoreTier:
    for lower_bound, tier in SCORE_TIERS:
        if overall_score >= lower_bound:
            return tier
    return ScoreTier.new


def score_activities(
    stellar_input: StellarActivityInput,
    polkadot_input: PolkadotActivityInput,
) -> ScoredActivities:
    """Compute every numeric field of a reputation record."""
    stellar = StellarActivity(
        **stellar_input.model_dump(exclude={"score"}),
        score=calculate_stellar_score(stellar_input),
    )
    polkadot = PolkadotActivity(
        **polkadot_input.model_dump(exclude={"score"}),
        score=calculate_polkadot_score(polkadot_input),
    )
    return ScoredActivities(
        stellar=stellar,
        polkadot=polkadot,
        overall_score=calculate_overall_score(stellar.score, polkadot.score),
        breakdown=calculate_score_breakdown(stellar, polkadot),
    )


def _assemble(scored: ScoredActivities, insights: ReputationInsights) -> ReputationRecord:
    record = ReputationRecord(
        overall_score=scored.overall_score,
        score_tier=score_tier(scored.overall_score),
        profile=insights.profile,
        stellar=scored.stellar,
        polkadot=scored.polkadot,
        breakdown=scored.breakdown,
        insights=insights,
        timestamp=datetime.now(timezone.utc),
    )
    reputation_records.labels(profile=record.profile.value).inc()
    log.info(
        "reputation_scored",
        overall_score=record.overall_score,
        stellar_score=record.stellar.score,
        polkadot_score=record.polkadot.score,
        profile=record.profile.value,
        confidence=insights.confidence,
        summary_source=insights.summary_source,
    )
    return record


def build_reputation_record(
    stellar_input: StellarActivityInput,
    polkadot_input: PolkadotActivityInput,
) -> ReputationRecord:
    """Build a complete record synchronously with the templated summary."""
    scored = score_activities(stellar_input, polkadot_input)
    insights = build_insights(
        scored.stellar, scored.polkadot, scored.overall_score, scored.breakdown
    )
    return _assemble(scored, insights)


async def generate_reputation_record(
    stellar_input: StellarActivityInput,
    polkadot_input: PolkadotActivityInput,
    narrator: InsightNarrator | None = None,
    narrative_timeout: float = DEFAULT_NARRATION_TIMEOUT,
) -> ReputationRecord:
    """Build a complete record, letting the narrator write the summary if it can."""
    scored = score_activities(stellar_input, polkadot_input)
    insights = await generate_insights(
        scored.stellar,
        scored.polkadot,
        scored.overall_score,
        scored.breakdown,
        narrator=narrator,
        timeout=narrative_timeout,
    )
    return _assemble(scored, insights)


async def scan_reputation(
    stellar_address: str,
    polkadot_address: str,
    fetch_stellar: StellarFetcher,
    fetch_polkadot: PolkadotFetcher,
    narrator: InsightNarrator | None = None,
    narrative_timeout: float = DEFAULT_NARRATION_TIMEOUT,
) -> ReputationRecord:
    """Fetch both chains concurrently, then score.

    Args:
        stellar_address: Stellar account public key.
        polkadot_address: SS58 Polkadot address.
        fetch_stellar: Coroutine function returning Stellar activity for an address.
        fetch_polkadot: Coroutine function returning Polkadot activity for an address.
        narrator: Optional summary narrator.
        narrative_timeout: Seconds to wait for the narrator.

    Raises:
        Whatever either fetcher raises (the first failure, unwrapped); the
        other fetch is cancelled and no record is built in that case.
    """
    structlog.contextvars.bind_contextvars(
        stellar_address=stellar_address, polkadot_address=polkadot_address
    )
    log.info("reputation_scan_started")

    # A failing fetch cancels the other one before the error leaves the group
    try:
        async with asyncio.TaskGroup() as group:
            stellar_task = group.create_task(fetch_stellar(stellar_address))
            polkadot_task = group.create_task(fetch_polkadot(polkadot_address))
    except ExceptionGroup as errors:
        log.warning("reputation_scan_fetch_failed", errors=len(errors.exceptions))
        raise errors.exceptions[0]

    stellar_input, polkadot_input = stellar_task.result(), polkadot_task.result()

    return await generate_reputation_record(
        stellar_input,
        polkadot_input,
        narrator=narrator,
        narrative_timeout=narrative_timeout,
    )
