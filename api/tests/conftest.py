"""Shared activity fixtures for the scoring tests."""

import pytest

from chainscore.schemas.activity import PolkadotActivityInput, StellarActivityInput

STELLAR_ADDRESS = "GBRPYHIL2CI3FNQ4BXLFMNDLFJUNPU2HY3ZMFSHONUCEOASW7QC7OX2H"
POLKADOT_ADDRESS = "15oF4uVJwmo4TdGW7VfQxNLavjCXviqxT9S1MgbjMNHr6Sp5"


def make_stellar(**metrics) -> StellarActivityInput:
    return StellarActivityInput(address=STELLAR_ADDRESS, **metrics)


def make_polkadot(**metrics) -> PolkadotActivityInput:
    return PolkadotActivityInput(address=POLKADOT_ADDRESS, **metrics)


@pytest.fixture
def empty_stellar() -> StellarActivityInput:
    return make_stellar()


@pytest.fixture
def empty_polkadot() -> PolkadotActivityInput:
    return make_polkadot()


@pytest.fixture
def saturated_stellar() -> StellarActivityInput:
    return make_stellar(
        transaction_count=100_000,
        total_volume=10_000_000,
        payment_count=10_000,
        account_age=10_000,
        asset_diversity=100,
        liquidity_provided=10_000_000,
    )


@pytest.fixture
def saturated_polkadot() -> PolkadotActivityInput:
    return make_polkadot(
        governance_votes=100,
        staking_amount=10_000_000,
        staking_duration=10_000,
        validator_nominations=100,
        parachain_interactions=100,
        account_age=10_000,
        identity_verified=True,
    )
