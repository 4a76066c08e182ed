"""Per-chain activity metrics consumed by the scoring engine.

Fetchers (or the request layer) construct the *Input models; validation of
non-negative numbers and address format happens here, at construction time,
so the scorers can treat every field as already-valid. The scored variants
add the bounded per-chain sub-score.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chainscore.services.addresses import (
    is_valid_polkadot_address,
    is_valid_stellar_address,
    normalize_address,
)

STELLAR_MAX_SCORE = 450
POLKADOT_MAX_SCORE = 550


class StellarActivityInput(BaseModel):
    """Stellar account activity (transactional/liquidity ledger)."""

    model_config = ConfigDict(frozen=True)

    address: str
    transaction_count: int = Field(default=0, ge=0)
    total_volume: float = Field(default=0.0, ge=0, allow_inf_nan=False)  # XLM
    payment_count: int = Field(default=0, ge=0)
    account_age: int = Field(default=0, ge=0)  # days
    asset_diversity: int = Field(default=0, ge=0)  # assets with positive balance
    liquidity_provided: float = Field(default=0.0, ge=0, allow_inf_nan=False)  # XLM

    @field_validator("address")
    @classmethod
    def address_is_stellar_public_key(cls, value: str) -> str:
        value = normalize_address(value)
        if not is_valid_stellar_address(value):
            raise ValueError(
                "Invalid Stellar address format. Must start with 'G' and be 56 characters."
            )
        return value


class StellarActivity(StellarActivityInput):
    score: int = Field(ge=0, le=STELLAR_MAX_SCORE)


class PolkadotActivityInput(BaseModel):
    """Polkadot account activity (staking/governance ledger)."""

    model_config = ConfigDict(frozen=True)

    address: str
    governance_votes: int = Field(default=0, ge=0)
    staking_amount: float = Field(default=0.0, ge=0, allow_inf_nan=False)  # DOT
    staking_duration: int = Field(default=0, ge=0)  # days
    validator_nominations: int = Field(default=0, ge=0)
    parachain_interactions: int = Field(default=0, ge=0)  # coarse, from extrinsic count
    account_age: int = Field(default=0, ge=0)  # days
    identity_verified: bool = False

    @field_validator("address")
    @classmethod
    def address_is_ss58(cls, value: str) -> str:
        value = normalize_address(value)
        if not is_valid_polkadot_address(value):
            raise ValueError(
                "Invalid Polkadot address format. Must be a valid SS58 address."
            )
        return value


class PolkadotActivity(PolkadotActivityInput):
    score: int = Field(ge=0, le=POLKADOT_MAX_SCORE)
