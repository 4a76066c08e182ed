"""Reputation scoring endpoint.

POST /api/v1/reputation/score -- score already-fetched Stellar + Polkadot activity
"""

from fastapi import APIRouter

from chainscore.config import settings
from chainscore.dependencies import Narrator
from chainscore.schemas.reputation import ReputationRecord, ScoreRequest
from chainscore.services.reputation import generate_reputation_record

router = APIRouter(prefix="/api/v1", tags=["reputation"])


@router.post(
    "/reputation/score",
    response_model=ReputationRecord,
)
async def score_reputation(
    body: ScoreRequest,
    narrator: Narrator,
) -> ReputationRecord:
    """Score activity metrics from both chains into a reputation record.

    The body carries metrics already collected by the per-chain fetchers;
    nothing is fetched here. Invalid metrics or address formats are rejected
    with 422 by the request schema before any scoring happens.

    The summary is narrated when a narrator is configured and answers within
    the configured timeout; otherwise the templated summary is returned.
    """
    return await generate_reputation_record(
        body.stellar,
        body.polkadot,
        narrator=narrator,
        narrative_timeout=settings.narrative_timeout_seconds,
    )
