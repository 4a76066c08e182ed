"""Cross-chain score breakdown.

Re-buckets the raw metrics of both chains into six explanatory categories.
The breakdown is not a decomposition of the two chain scores: each category
recombines the relevant per-chain component points and rescales the
recombined maximum onto the category's own ceiling, then clamps.

    category                  components                          source max -> ceiling
    transaction_consistency   stellar transactions + payments          180 -> 200
    governance_participation  polkadot governance + identity           220 -> 250
    staking_behavior          polkadot amount + duration + nominations 250 -> 200
    liquidity_provision       stellar liquidity                         50 -> 150
    account_age               weeks of the older account (cap 80)       80 -> 100
    asset_diversity           stellar asset diversity                   50 -> 100
"""

from chainscore.schemas.activity import PolkadotActivityInput, StellarActivityInput
from chainscore.schemas.reputation import ScoreBreakdown
from chainscore.services.scoring import (
    DAYS_PER_WEEK,
    POLKADOT_COMPONENT_CAPS,
    STELLAR_COMPONENT_CAPS,
    clamp,
    polkadot_score_components,
    stellar_score_components,
)

BREAKDOWN_CEILINGS: dict[str, int] = {
    "transaction_consistency": 200,
    "governance_participation": 250,
    "staking_behavior": 200,
    "liquidity_provision": 150,
    "account_age": 100,
    "asset_diversity": 100,
}

# Weeks of account age that saturate the age category (the longer per-chain cap).
AGE_WEEKS_CAP = 80


def rescale(points: int, source_max: int, ceiling: int) -> int:
    """Map points on [0, source_max] onto [0, ceiling] with integer floor division."""
    if source_max <= 0:
        return 0
    return clamp(points * ceiling // source_max, 0, ceiling)


def _category(points: int, source_max: int, name: str) -> int:
    return rescale(points, source_max, BREAKDOWN_CEILINGS[name])


def calculate_score_breakdown(
    stellar: StellarActivityInput,
    polkadot: PolkadotActivityInput,
) -> ScoreBreakdown:
    """Compute the six-category breakdown from raw metrics of both chains.

    Accepts scored or unscored activity; the per-chain scores themselves are
    never read, only the raw metrics.
    """
    s = stellar_score_components(stellar)
    p = polkadot_score_components(polkadot)
    s_caps = STELLAR_COMPONENT_CAPS
    p_caps = POLKADOT_COMPONENT_CAPS

    oldest_weeks = max(stellar.account_age, polkadot.account_age) // DAYS_PER_WEEK

    return ScoreBreakdown(
        transaction_consistency=_category(
            s["transactions"] + s["payments"],
            s_caps["transactions"] + s_caps["payments"],
            "transaction_consistency",
        ),
        governance_participation=_category(
            p["governance"] + p["identity"],
            p_caps["governance"] + p_caps["identity"],
            "governance_participation",
        ),
        staking_behavior=_category(
            p["staking_amount"] + p["staking_duration"] + p["nominations"],
            p_caps["staking_amount"] + p_caps["staking_duration"] + p_caps["nominations"],
            "staking_behavior",
        ),
        liquidity_provision=_category(
            s["liquidity"], s_caps["liquidity"], "liquidity_provision"
        ),
        account_age=_category(
            min(AGE_WEEKS_CAP, oldest_weeks), AGE_WEEKS_CAP, "account_age"
        ),
        asset_diversity=_category(
            s["asset_diversity"], s_caps["asset_diversity"], "asset_diversity"
        ),
    )
