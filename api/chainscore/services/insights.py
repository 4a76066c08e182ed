"""Profile classification and rule-based reputation insights.

The structured part of the insights (profile, confidence, strengths, red
flags, recommendations) is a pure function of the metrics, the overall score
and the breakdown, see build_insights(). generate_insights() wraps it and may
ask an InsightNarrator to replace the templated summary; a skipped, slow or
failing narrator never changes anything but the summary text and never raises.

Classification policy:
- Overall score below NEWCOMER_SCORE_THRESHOLD -> Newcomer, regardless of shares.
- Otherwise each profile's category is normalized against its own ceiling.
  The Trader share is the larger of transaction consistency and Stellar
  volume points (over the volume cap), so high-volume low-count wallets
  still read as traders.
- Every profile share zero (score carried by account age or holdings
  alone) -> Newcomer: there is no behavior to classify yet.
- The highest share wins if it beats the runner-up by DOMINANCE_MARGIN;
  ties are broken by PROFILE_CATEGORIES order. No clear winner -> Balanced.
"""

import asyncio
import time
from typing import assert_never

import structlog

from chainscore.metrics import insight_narrations, narration_duration
from chainscore.schemas.activity import PolkadotActivityInput, StellarActivityInput
from chainscore.schemas.reputation import (
    ReputationInsights,
    ReputationProfile,
    ScoreBreakdown,
)
from chainscore.services.breakdown import BREAKDOWN_CEILINGS
from chainscore.services.narrative import (
    InsightNarrator,
    NarrationRequest,
    NarrativeSkippedError,
)
from chainscore.services.scoring import (
    STELLAR_COMPONENT_CAPS,
    VOLUME_POINTS_MULTIPLIER,
    log_points,
)

log = structlog.get_logger(__name__)

NEWCOMER_SCORE_THRESHOLD = 50
DOMINANCE_MARGIN = 0.15
MIN_CONFIDENCE = 10
MAX_RECOMMENDATIONS = 5
DEFAULT_NARRATION_TIMEOUT = 8.0

# Profile -> breakdown category that signals it
PROFILE_CATEGORIES: dict[ReputationProfile, str] = {
    ReputationProfile.trader: "transaction_consistency",
    ReputationProfile.governor: "governance_participation",
    ReputationProfile.staker: "staking_behavior",
    ReputationProfile.liquidity_provider: "liquidity_provision",
}

# Rule thresholds
ACTIVE_GOVERNANCE_VOTES = 5
COMMITTED_STAKING_DAYS = 90
DIVERSIFIED_NOMINATIONS = 3
CONSISTENT_TRANSACTIONS_POINTS = 100
ESTABLISHED_ACCOUNT_DAYS = 365
NEW_ACCOUNT_DAYS = 30
DIVERSIFIED_ASSETS = 5
SIGNIFICANT_VOLUME_XLM = 10_000


def volume_share(stellar: StellarActivityInput | None) -> float:
    """Stellar volume points relative to the volume cap, in [0, 1]."""
    if stellar is None:
        return 0.0
    cap = STELLAR_COMPONENT_CAPS["volume"]
    return log_points(stellar.total_volume, VOLUME_POINTS_MULTIPLIER, cap) / cap


def category_shares(
    breakdown: ScoreBreakdown,
    stellar: StellarActivityInput | None = None,
) -> dict[ReputationProfile, float]:
    """Share of each profile signal relative to its own ceiling, in [0, 1].

    When the Stellar activity is given, the Trader share also counts volume.
    """
    shares = {
        profile: getattr(breakdown, category) / BREAKDOWN_CEILINGS[category]
        for profile, category in PROFILE_CATEGORIES.items()
    }
    shares[ReputationProfile.trader] = max(
        shares[ReputationProfile.trader], volume_share(stellar)
    )
    return shares


def _ranked_shares(
    breakdown: ScoreBreakdown,
    stellar: StellarActivityInput | None = None,
) -> list[tuple[ReputationProfile, float]]:
    # sorted() is stable, so equal shares keep PROFILE_CATEGORIES order
    shares = category_shares(breakdown, stellar)
    return sorted(shares.items(), key=lambda item: item[1], reverse=True)


def classify_profile(
    overall_score: int,
    breakdown: ScoreBreakdown,
    stellar: StellarActivityInput | None = None,
) -> ReputationProfile:
    if overall_score < NEWCOMER_SCORE_THRESHOLD:
        return ReputationProfile.newcomer

    ranked = _ranked_shares(breakdown, stellar)
    (leader, top), (_, runner_up) = ranked[0], ranked[1]
    if top == 0:
        return ReputationProfile.newcomer
    if top - runner_up > DOMINANCE_MARGIN:
        return leader
    return ReputationProfile.balanced


def metric_coverage(stellar: StellarActivityInput, polkadot: PolkadotActivityInput) -> float:
    """Fraction of raw metrics (both chains) that carry any signal."""
    metrics = [
        stellar.transaction_count,
        stellar.total_volume,
        stellar.payment_count,
        stellar.account_age,
        stellar.asset_diversity,
        stellar.liquidity_provided,
        polkadot.governance_votes,
        polkadot.staking_amount,
        polkadot.staking_duration,
        polkadot.validator_nominations,
        polkadot.parachain_interactions,
        polkadot.account_age,
        polkadot.identity_verified,
    ]
    return sum(1 for value in metrics if value) / len(metrics)


def calculate_confidence(
    stellar: StellarActivityInput,
    polkadot: PolkadotActivityInput,
    breakdown: ScoreBreakdown,
) -> int:
    """Heuristic confidence in the classification, in [MIN_CONFIDENCE, 100].

    Weighs how much of the input carries signal (30%), how far the leading
    category is ahead of the runner-up (40%, saturating at twice the dominance
    margin) and how strong the leading category is (30%). Near-uniform or
    near-empty inputs land at the low end.
    """
    ranked = _ranked_shares(breakdown, stellar)
    top, runner_up = ranked[0][1], ranked[1][1]
    separation = min(1.0, (top - runner_up) / (2 * DOMINANCE_MARGIN))
    raw = 100 * (
        0.3 * metric_coverage(stellar, polkadot)
        + 0.4 * separation
        + 0.3 * min(1.0, top)
    )
    return max(MIN_CONFIDENCE, min(100, round(raw)))


def collect_strengths(
    stellar: StellarActivityInput,
    polkadot: PolkadotActivityInput,
    breakdown: ScoreBreakdown,
) -> list[str]:
    strengths = []
    if polkadot.identity_verified:
        strengths.append("Verified on-chain identity on Polkadot")
    if polkadot.governance_votes >= ACTIVE_GOVERNANCE_VOTES:
        strengths.append(
            f"Active governance participant ({polkadot.governance_votes} referendum votes)"
        )
    if polkadot.staking_amount > 0 and polkadot.staking_duration >= COMMITTED_STAKING_DAYS:
        strengths.append(
            f"Committed staker ({polkadot.staking_amount:,.2f} DOT bonded "
            f"for {polkadot.staking_duration} days)"
        )
    if polkadot.validator_nominations >= DIVERSIFIED_NOMINATIONS:
        strengths.append(
            f"Spreads stake across {polkadot.validator_nominations} nominated validators"
        )
    if breakdown.transaction_consistency >= CONSISTENT_TRANSACTIONS_POINTS:
        strengths.append("Consistent transaction history on Stellar")
    if stellar.total_volume >= SIGNIFICANT_VOLUME_XLM:
        strengths.append(f"Significant payment volume ({stellar.total_volume:,.0f} XLM)")
    if stellar.liquidity_provided > 0:
        strengths.append("Provides liquidity to Stellar AMM pools")
    if stellar.asset_diversity >= DIVERSIFIED_ASSETS:
        strengths.append(f"Diversified Stellar portfolio ({stellar.asset_diversity} assets)")
    if max(stellar.account_age, polkadot.account_age) >= ESTABLISHED_ACCOUNT_DAYS:
        strengths.append("Established accounts with over a year of history")
    return strengths


def collect_red_flags(
    stellar: StellarActivityInput,
    polkadot: PolkadotActivityInput,
) -> tuple[list[str], list[str]]:
    """Rule checks that produce red flags and the recommendations they imply.

    Returns:
        (red_flags, recommendations) - recommendations deduplicated, in rule
        order, at most MAX_RECOMMENDATIONS.
    """
    red_flags: list[str] = []
    recommendations: list[str] = []

    if polkadot.governance_votes == 0:
        red_flags.append("No governance participation on Polkadot")
        recommendations.append("Vote on OpenGov referenda to build governance reputation")
    if not polkadot.identity_verified:
        red_flags.append("No verified on-chain identity")
        recommendations.append(
            "Set an on-chain identity on Polkadot and request a registrar judgement"
        )
    if max(stellar.account_age, polkadot.account_age) < NEW_ACCOUNT_DAYS:
        red_flags.append(f"Very new accounts (under {NEW_ACCOUNT_DAYS} days of history)")
        recommendations.append(
            "Keep both accounts active over time; account age adds a point every week"
        )
    if stellar.transaction_count == 0:
        red_flags.append("No transaction history on Stellar")
        recommendations.append("Build a Stellar transaction history through regular payments")
    if polkadot.staking_amount == 0:
        red_flags.append("No DOT staked")
        recommendations.append("Stake DOT and nominate validators to earn staking reputation")
    elif polkadot.validator_nominations == 0:
        recommendations.append("Nominate validators directly to strengthen staking behavior")
    if stellar.liquidity_provided == 0:
        recommendations.append("Provide liquidity to a Stellar AMM pool to earn liquidity points")
    if stellar.asset_diversity <= 1:
        recommendations.append("Hold a wider set of Stellar assets to improve diversity")

    deduplicated = list(dict.fromkeys(recommendations))
    return red_flags, deduplicated[:MAX_RECOMMENDATIONS]


def summarize(
    profile: ReputationProfile,
    overall_score: int,
    stellar: StellarActivityInput,
    polkadot: PolkadotActivityInput,
) -> str:
    """Templated summary used whenever no narrator summary is available."""
    score = f"Overall score {overall_score}/1000."
    match profile:
        case ReputationProfile.newcomer:
            return (
                f"This wallet pair has little on-chain history yet. {score} "
                "Regular activity on Stellar and Polkadot will build reputation over time."
            )
        case ReputationProfile.trader:
            return (
                "Reputation is driven by Stellar trading activity: "
                f"{stellar.transaction_count} transactions and {stellar.payment_count} "
                f"payments with {stellar.total_volume:,.2f} XLM of outgoing volume. {score}"
            )
        case ReputationProfile.governor:
            identity = (
                " backed by a verified identity" if polkadot.identity_verified else ""
            )
            return (
                "Reputation is driven by Polkadot governance: "
                f"{polkadot.governance_votes} referendum votes{identity}. {score}"
            )
        case ReputationProfile.staker:
            return (
                "Reputation is driven by Polkadot staking: "
                f"{polkadot.staking_amount:,.2f} DOT bonded for {polkadot.staking_duration} "
                f"days across {polkadot.validator_nominations} nominated validators. {score}"
            )
        case ReputationProfile.liquidity_provider:
            return (
                "Reputation is driven by liquidity provision: "
                f"{stellar.liquidity_provided:,.2f} XLM supplied to Stellar pools. {score}"
            )
        case ReputationProfile.balanced:
            return (
                "Activity is spread across trading, governance, staking and liquidity "
                f"with no single dominant signal. {score}"
            )
        case _:
            assert_never(profile)


def build_insights(
    stellar: StellarActivityInput,
    polkadot: PolkadotActivityInput,
    overall_score: int,
    breakdown: ScoreBreakdown,
) -> ReputationInsights:
    """Deterministic insights: same inputs, same output, no external calls."""
    profile = classify_profile(overall_score, breakdown, stellar)
    red_flags, recommendations = collect_red_flags(stellar, polkadot)
    return ReputationInsights(
        profile=profile,
        confidence=calculate_confidence(stellar, polkadot, breakdown),
        summary=summarize(profile, overall_score, stellar, polkadot),
        strengths=tuple(collect_strengths(stellar, polkadot, breakdown)),
        recommendations=tuple(recommendations),
        red_flags=tuple(red_flags),
        summary_source="template",
    )


async def generate_insights(
    stellar: StellarActivityInput,
    polkadot: PolkadotActivityInput,
    overall_score: int,
    breakdown: ScoreBreakdown,
    narrator: InsightNarrator | None = None,
    timeout: float = DEFAULT_NARRATION_TIMEOUT,
) -> ReputationInsights:
    """Build insights and, when a narrator is given, try to narrate the summary.

    The narrator call is bounded by ``timeout`` seconds. Skips, timeouts,
    errors and empty responses all keep the templated summary.

    Args:
        stellar: Stellar activity (scored or unscored).
        polkadot: Polkadot activity (scored or unscored).
        overall_score: Overall score in [0, 1000].
        breakdown: Category breakdown for the same metrics.
        narrator: Optional text-generation collaborator.
        timeout: Seconds to wait for the narrator.

    Returns:
        A complete ReputationInsights record.
    """
    insights = build_insights(stellar, polkadot, overall_score, breakdown)
    if narrator is None:
        return insights

    request = NarrationRequest(
        stellar=stellar,
        polkadot=polkadot,
        overall_score=overall_score,
        breakdown=breakdown,
        profile=insights.profile,
        confidence=insights.confidence,
        strengths=insights.strengths,
        red_flags=insights.red_flags,
    )

    start = time.monotonic()
    try:
        summary = await asyncio.wait_for(narrator.narrate(request), timeout=timeout)
    except NarrativeSkippedError:
        insight_narrations.labels(outcome="skipped").inc()
        return insights
    except asyncio.TimeoutError:
        log.warning("narration_timeout", timeout_seconds=timeout)
        insight_narrations.labels(outcome="timeout").inc()
        return insights
    except Exception:
        log.error("narration_failed", exc_info=True)
        insight_narrations.labels(outcome="error").inc()
        return insights
    finally:
        narration_duration.observe(time.monotonic() - start)

    if not summary or not summary.strip():
        log.warning("narration_empty")
        insight_narrations.labels(outcome="empty").inc()
        return insights

    insight_narrations.labels(outcome="success").inc()
    return insights.model_copy(
        update={"summary": summary.strip(), "summary_source": "narrator"}
    )
