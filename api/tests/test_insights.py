"""Tests for profile classification and deterministic insights."""

import pytest

from chainscore.schemas.reputation import ReputationProfile, ScoreBreakdown
from chainscore.services.breakdown import calculate_score_breakdown
from chainscore.services.insights import (
    MAX_RECOMMENDATIONS,
    MIN_CONFIDENCE,
    build_insights,
    calculate_confidence,
    classify_profile,
    metric_coverage,
    summarize,
    volume_share,
)
from chainscore.services.scoring import (
    calculate_overall_score,
    calculate_polkadot_score,
    calculate_stellar_score,
)
from conftest import make_polkadot, make_stellar


def _insights(stellar, polkadot):
    overall = calculate_overall_score(
        calculate_stellar_score(stellar), calculate_polkadot_score(polkadot)
    )
    breakdown = calculate_score_breakdown(stellar, polkadot)
    return build_insights(stellar, polkadot, overall, breakdown)


def _breakdown(**values) -> ScoreBreakdown:
    fields = dict.fromkeys(
        [
            "transaction_consistency",
            "governance_participation",
            "staking_behavior",
            "liquidity_provision",
            "account_age",
            "asset_diversity",
        ],
        0,
    )
    fields.update(values)
    return ScoreBreakdown(**fields)


class TestClassifyProfile:
    def test_low_score_is_newcomer_regardless_of_shares(self):
        breakdown = _breakdown(transaction_consistency=200)
        assert classify_profile(49, breakdown) == ReputationProfile.newcomer

    def test_clear_leader_wins(self):
        # 0.70 vs 0.40 share
        breakdown = _breakdown(transaction_consistency=140, governance_participation=100)
        assert classify_profile(300, breakdown) == ReputationProfile.trader

    def test_within_margin_is_balanced(self):
        # 0.50 vs 0.40 share
        breakdown = _breakdown(transaction_consistency=100, governance_participation=100)
        assert classify_profile(300, breakdown) == ReputationProfile.balanced

    def test_no_profile_signal_is_newcomer(self):
        # Age and holdings alone clear the score threshold but show no behavior
        breakdown = _breakdown(account_age=100, asset_diversity=100)
        assert classify_profile(200, breakdown) == ReputationProfile.newcomer

    def test_volume_counts_toward_trader(self):
        breakdown = _breakdown(account_age=20)
        stellar = make_stellar(transaction_count=5, total_volume=10_000_000)
        assert classify_profile(114, breakdown) == ReputationProfile.newcomer
        assert classify_profile(114, breakdown, stellar) == ReputationProfile.trader

    def test_shares_are_normalized_per_category(self):
        # 150/250 = 0.6 governance vs 150/150 = 1.0 liquidity
        breakdown = _breakdown(governance_participation=150, liquidity_provision=150)
        assert classify_profile(300, breakdown) == ReputationProfile.liquidity_provider


class TestProfilesFromMetrics:
    def test_empty_is_newcomer(self, empty_stellar, empty_polkadot):
        insights = _insights(empty_stellar, empty_polkadot)
        assert insights.profile == ReputationProfile.newcomer
        assert insights.confidence == MIN_CONFIDENCE

    def test_trader(self, empty_polkadot):
        stellar = make_stellar(transaction_count=1000, payment_count=400, total_volume=100_000)
        assert _insights(stellar, empty_polkadot).profile == ReputationProfile.trader

    def test_governor(self, empty_stellar):
        polkadot = make_polkadot(governance_votes=20, identity_verified=True, account_age=200)
        assert _insights(empty_stellar, polkadot).profile == ReputationProfile.governor

    def test_staker(self, empty_stellar):
        polkadot = make_polkadot(
            staking_amount=100_000,
            staking_duration=400,
            validator_nominations=5,
            account_age=400,
        )
        assert _insights(empty_stellar, polkadot).profile == ReputationProfile.staker

    def test_high_volume_few_transactions_is_trader(self, empty_polkadot):
        stellar = make_stellar(transaction_count=5, total_volume=10_000_000, account_age=100)
        insights = _insights(stellar, empty_polkadot)
        assert insights.profile == ReputationProfile.trader
        assert insights.confidence > MIN_CONFIDENCE

    def test_passive_history_only_is_newcomer(self, empty_polkadot):
        # 70 age points + 50 diversity points, nothing in any profile category
        stellar = make_stellar(account_age=700, asset_diversity=10)
        assert _insights(stellar, empty_polkadot).profile == ReputationProfile.newcomer

    def test_liquidity_provider(self, empty_polkadot):
        stellar = make_stellar(liquidity_provided=100_000, account_age=70)
        assert _insights(stellar, empty_polkadot).profile == ReputationProfile.liquidity_provider

    def test_saturated_is_balanced(self, saturated_stellar, saturated_polkadot):
        assert _insights(saturated_stellar, saturated_polkadot).profile == (
            ReputationProfile.balanced
        )


class TestConfidence:
    def test_bounds(self, empty_stellar, empty_polkadot, saturated_stellar, saturated_polkadot):
        for stellar, polkadot in [
            (empty_stellar, empty_polkadot),
            (saturated_stellar, saturated_polkadot),
            (saturated_stellar, empty_polkadot),
        ]:
            breakdown = calculate_score_breakdown(stellar, polkadot)
            assert 0 <= calculate_confidence(stellar, polkadot, breakdown) <= 100

    def test_dominant_profile_beats_uniform(
        self, empty_polkadot, saturated_stellar, saturated_polkadot
    ):
        trader = make_stellar(transaction_count=1000, payment_count=400, total_volume=100_000)
        dominant = calculate_confidence(
            trader, empty_polkadot, calculate_score_breakdown(trader, empty_polkadot)
        )
        uniform = calculate_confidence(
            saturated_stellar,
            saturated_polkadot,
            calculate_score_breakdown(saturated_stellar, saturated_polkadot),
        )
        assert dominant > uniform

    @pytest.mark.parametrize(
        "volume,share", [(0, 0.0), (0.5, 0.0), (1000, 0.6), (10_000_000, 1.0)]
    )
    def test_volume_share(self, volume, share):
        assert volume_share(make_stellar(total_volume=volume)) == share

    def test_metric_coverage(self, empty_stellar, empty_polkadot, saturated_stellar, saturated_polkadot):
        assert metric_coverage(empty_stellar, empty_polkadot) == 0
        assert metric_coverage(saturated_stellar, saturated_polkadot) == 1


class TestRuleInsights:
    def test_zero_governance_is_flagged_with_recommendation(self, empty_stellar, empty_polkadot):
        insights = _insights(empty_stellar, empty_polkadot)
        assert "No governance participation on Polkadot" in insights.red_flags
        assert any("OpenGov" in rec for rec in insights.recommendations)

    def test_verified_identity_is_strength(self, empty_stellar):
        insights = _insights(empty_stellar, make_polkadot(identity_verified=True))
        assert "Verified on-chain identity on Polkadot" in insights.strengths
        assert "No verified on-chain identity" not in insights.red_flags

    def test_recommendations_are_capped(self, empty_stellar, empty_polkadot):
        insights = _insights(empty_stellar, empty_polkadot)
        assert len(insights.recommendations) == MAX_RECOMMENDATIONS
        assert len(set(insights.recommendations)) == len(insights.recommendations)

    def test_empty_accounts_have_no_strengths(self, empty_stellar, empty_polkadot):
        assert _insights(empty_stellar, empty_polkadot).strengths == ()

    def test_saturated_accounts_have_no_red_flags(self, saturated_stellar, saturated_polkadot):
        insights = _insights(saturated_stellar, saturated_polkadot)
        assert insights.red_flags == ()
        assert "Established accounts with over a year of history" in insights.strengths

    def test_staked_without_nominations_gets_recommendation(self, empty_stellar):
        insights = _insights(empty_stellar, make_polkadot(staking_amount=500))
        assert "No DOT staked" not in insights.red_flags
        assert "Nominate validators directly to strengthen staking behavior" in (
            insights.recommendations
        )


class TestTemplatedSummary:
    @pytest.mark.parametrize("profile", list(ReputationProfile))
    def test_every_profile_has_summary(self, profile, saturated_stellar, saturated_polkadot):
        text = summarize(profile, 640, saturated_stellar, saturated_polkadot)
        assert "640/1000" in text

    def test_build_insights_uses_template(self, empty_stellar, empty_polkadot):
        insights = _insights(empty_stellar, empty_polkadot)
        assert insights.summary_source == "template"
        assert insights.summary

    def test_deterministic(self, saturated_stellar, empty_polkadot):
        assert _insights(saturated_stellar, empty_polkadot) == _insights(
            saturated_stellar, empty_polkadot
        )
