"""Narrative summary service for reputation insights.

Turns the deterministic classification of a scan (profile, breakdown,
strengths, red flags) into a short plain-English summary paragraph.

Uses Anthropic Claude (claude-haiku-4-5) for generation. The narrator only
ever decorates the summary text: profile, confidence, strengths, red flags
and recommendations are computed without it, and callers fall back to a
templated summary when it is skipped, slow or failing.
"""

from dataclasses import dataclass
from typing import Protocol

import structlog

from chainscore.schemas.activity import PolkadotActivityInput, StellarActivityInput
from chainscore.schemas.reputation import ReputationProfile, ScoreBreakdown

log = structlog.get_logger(__name__)

DEFAULT_NARRATIVE_MODEL = "claude-haiku-4-5-20251001"
DEFAULT_MAX_OUTPUT_TOKENS = 400
MAX_SUMMARY_CHARS = 1200


class NarrativeSkippedError(Exception):
    """Raised when narration is skipped (no API key)."""
    pass


@dataclass(frozen=True)
class NarrationRequest:
    """Everything a narrator may describe.

    The activity models still carry the wallet addresses; the prompt built
    from this request includes only metrics and classification.
    """

    stellar: StellarActivityInput
    polkadot: PolkadotActivityInput
    overall_score: int
    breakdown: ScoreBreakdown
    profile: ReputationProfile
    confidence: int
    strengths: tuple[str, ...]
    red_flags: tuple[str, ...]


class InsightNarrator(Protocol):
    async def narrate(self, request: NarrationRequest) -> str:
        """Return a summary paragraph for the scan described by request."""
        ...


class AnthropicInsightNarrator:
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_NARRATIVE_MODEL,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_output_tokens = max_output_tokens
        self._skip = not api_key
        self._client = None
        if self._skip:
            log.warning("insight_narrator_no_api_key")

    def _get_client(self):
        if self._client is None:
            import anthropic
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self._client

    async def narrate(self, request: NarrationRequest) -> str:
        """Generate a summary paragraph for a reputation scan.

        Args:
            request: Metrics, scores and the deterministic classification.

        Returns:
            Summary text, trimmed to MAX_SUMMARY_CHARS.

        Raises:
            NarrativeSkippedError: When no API key is configured.
        """
        if self._skip:
            raise NarrativeSkippedError("ANTHROPIC_API_KEY not configured")

        client = self._get_client()

        system_prompt = (
            "You are an analyst summarizing a wallet's on-chain reputation "
            "across Stellar and Polkadot. Write 2-4 sentences in plain "
            "English. Describe the behavior the numbers show, mention the "
            "most important strength and the most important gap, and do not "
            "invent figures that are not in the input. Do not use markdown."
        )

        response = await client.messages.create(
            model=self._model,
            system=system_prompt,
            messages=[{"role": "user", "content": build_narration_prompt(request)}],
            max_tokens=self._max_output_tokens,
        )

        text = response.content[0].text
        return text.strip()[:MAX_SUMMARY_CHARS]


def build_narration_prompt(request: NarrationRequest) -> str:
    """Render the narration request as the user prompt."""
    s = request.stellar
    p = request.polkadot
    b = request.breakdown
    lines = [
        f"Overall score: {request.overall_score}/1000",
        f"Profile: {request.profile.value} (confidence {request.confidence}/100)",
        "",
        "Stellar activity:",
        f"- transactions: {s.transaction_count}, payments: {s.payment_count}",
        f"- outgoing volume: {s.total_volume:.2f} XLM",
        f"- liquidity provided: {s.liquidity_provided:.2f} XLM",
        f"- assets held: {s.asset_diversity}, account age: {s.account_age} days",
        "",
        "Polkadot activity:",
        f"- governance votes: {p.governance_votes}",
        f"- staked: {p.staking_amount:.2f} DOT for {p.staking_duration} days",
        f"- validators nominated: {p.validator_nominations}",
        f"- identity verified: {'yes' if p.identity_verified else 'no'}",
        f"- account age: {p.account_age} days",
        "",
        "Breakdown:",
        f"- transaction consistency {b.transaction_consistency}/200",
        f"- governance participation {b.governance_participation}/250",
        f"- staking behavior {b.staking_behavior}/200",
        f"- liquidity provision {b.liquidity_provision}/150",
        f"- account age {b.account_age}/100",
        f"- asset diversity {b.asset_diversity}/100",
        "",
        "Strengths: " + ("; ".join(request.strengths) or "none"),
        "Red flags: " + ("; ".join(request.red_flags) or "none"),
        "",
        "Write the summary now.",
    ]
    return "\n".join(lines)
