"""ChainScore Pydantic schemas package.

Re-exports activity and reputation schemas for convenient importing:

    from chainscore.schemas import StellarActivityInput, ReputationRecord, ...
"""

from chainscore.schemas.activity import (
    PolkadotActivity,
    PolkadotActivityInput,
    StellarActivity,
    StellarActivityInput,
)
from chainscore.schemas.reputation import (
    AddressCheck,
    AddressValidationResponse,
    ReputationInsights,
    ReputationProfile,
    ReputationRecord,
    ScoreBreakdown,
    ScoreRequest,
    ScoreTier,
)

__all__ = [
    # Activity
    "StellarActivityInput",
    "StellarActivity",
    "PolkadotActivityInput",
    "PolkadotActivity",
    # Reputation
    "ReputationProfile",
    "ScoreTier",
    "ScoreBreakdown",
    "ReputationInsights",
    "ReputationRecord",
    "ScoreRequest",
    # Addresses
    "AddressCheck",
    "AddressValidationResponse",
]
