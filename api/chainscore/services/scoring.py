"""Per-chain reputation scorers and the overall score aggregation.

Each chain score is a sum of independently capped components, clamped to the
chain's ceiling. The ceilings are complementary (450 + 550 = 1000) so the
overall score is the plain sum of both chain scores and anyone can check
overall == stellar.score + polkadot.score.

Design notes:
- Every function here is pure: no I/O, no settings lookup, no logging.
  Inputs are assumed validated at construction (see schemas.activity);
  negative or NaN values are a caller contract violation and are not guarded.
- Logarithmic components (volume, liquidity, staking amount) reward order of
  magnitude growth. Amounts below 1 would produce negative logarithms, so the
  component is floored at 0 to keep every component monotonic in its metric.
- The *_score_components functions expose the per-component points so the
  breakdown calculator can recombine them without duplicating the formulas.
"""

import math

from chainscore.schemas.activity import (
    POLKADOT_MAX_SCORE,
    STELLAR_MAX_SCORE,
    PolkadotActivityInput,
    StellarActivityInput,
)
from chainscore.schemas.reputation import OVERALL_MAX_SCORE

# Component ceilings (points)
STELLAR_COMPONENT_CAPS: dict[str, int] = {
    "transactions": 100,
    "volume": 100,
    "payments": 80,
    "account_age": 70,
    "asset_diversity": 50,
    "liquidity": 50,
}

POLKADOT_COMPONENT_CAPS: dict[str, int] = {
    "governance": 150,
    "staking_amount": 120,
    "staking_duration": 80,
    "nominations": 50,
    "account_age": 80,
    "identity": 70,
}

IDENTITY_BONUS = 70
VOLUME_POINTS_MULTIPLIER = 20
DAYS_PER_WEEK = 7


def clamp(value: int, lower: int, upper: int) -> int:
    """Bound an integer score to [lower, upper]."""
    return max(lower, min(upper, value))


def log_points(amount: float, multiplier: int, cap: int) -> int:
    """Points on a log10 scale: floor(log10(amount) * multiplier), in [0, cap].

    Returns 0 for amount <= 0 (no activity means no points, and log10 is undefined).
    """
    if amount <= 0:
        return 0
    return clamp(math.floor(math.log10(amount) * multiplier), 0, cap)


def stellar_score_components(activity: StellarActivityInput) -> dict[str, int]:
    """Per-component points for a Stellar account.

    Scoring table:
    - transactions: 1 point per 10 transactions (cap 100)
    - volume: log10(XLM volume) * 20 (cap 100); 100 XLM = 40, 10,000 XLM = 80
    - payments: 1 point per 5 payments (cap 80)
    - account_age: 1 point per week (cap 70)
    - asset_diversity: 5 points per held asset (cap 50)
    - liquidity: log10(XLM provided) * 10 (cap 50)
    """
    caps = STELLAR_COMPONENT_CAPS
    return {
        "transactions": min(caps["transactions"], activity.transaction_count // 10),
        "volume": log_points(
            activity.total_volume, VOLUME_POINTS_MULTIPLIER, caps["volume"]
        ),
        "payments": min(caps["payments"], activity.payment_count // 5),
        "account_age": min(caps["account_age"], activity.account_age // DAYS_PER_WEEK),
        "asset_diversity": min(caps["asset_diversity"], activity.asset_diversity * 5),
        "liquidity": log_points(activity.liquidity_provided, 10, caps["liquidity"]),
    }


def calculate_stellar_score(activity: StellarActivityInput) -> int:
    """Calculate the Stellar sub-score in [0, 450]."""
    return clamp(sum(stellar_score_components(activity).values()), 0, STELLAR_MAX_SCORE)


def polkadot_score_components(activity: PolkadotActivityInput) -> dict[str, int]:
    """Per-component points for a Polkadot account.

    Scoring table:
    - governance: 10 points per referendum vote (cap 150)
    - staking_amount: log10(DOT staked) * 20 (cap 120); 10 DOT = 20, 1M DOT = 120
    - staking_duration: 1 point per week staked (cap 80)
    - nominations: 10 points per nominated validator (cap 50)
    - account_age: 1 point per week (cap 80)
    - identity: flat 70 when the on-chain identity has a positive judgement
    """
    caps = POLKADOT_COMPONENT_CAPS
    return {
        "governance": min(caps["governance"], activity.governance_votes * 10),
        "staking_amount": log_points(activity.staking_amount, 20, caps["staking_amount"]),
        "staking_duration": min(
            caps["staking_duration"], activity.staking_duration // DAYS_PER_WEEK
        ),
        "nominations": min(caps["nominations"], activity.validator_nominations * 10),
        "account_age": min(caps["account_age"], activity.account_age // DAYS_PER_WEEK),
        "identity": IDENTITY_BONUS if activity.identity_verified else 0,
    }


def calculate_polkadot_score(activity: PolkadotActivityInput) -> int:
    """Calculate the Polkadot sub-score in [0, 550]."""
    return clamp(sum(polkadot_score_components(activity).values()), 0, POLKADOT_MAX_SCORE)


def calculate_overall_score(stellar_score: int, polkadot_score: int) -> int:
    """Combine both chain sub-scores into the overall score in [0, 1000].

    No weighting: the chain ceilings already partition the 1000-point scale.
    """
    return clamp(stellar_score + polkadot_score, 0, OVERALL_MAX_SCORE)
