import re

# Stellar public keys: StrKey "G" prefix followed by 55 base32 characters.
_STELLAR_ADDRESS_PATTERN = re.compile(r"^G[A-Z2-7]{55}$")

# Polkadot SS58: base58 alphabet (no 0, O, I, l), 47-48 characters.
_POLKADOT_ADDRESS_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{47,48}$")


def normalize_address(raw: str) -> str:
    """Strip surrounding whitespace from a pasted wallet address.

    Addresses are case-sensitive on both chains, so no case folding happens here.
    """
    return raw.strip()


def is_valid_stellar_address(address: str) -> bool:
    """Check that an address looks like a Stellar account public key.

    Only the StrKey shape is checked (prefix, alphabet, length); the checksum
    is not verified.
    """
    if not address:
        return False
    return bool(_STELLAR_ADDRESS_PATTERN.match(normalize_address(address)))


def is_valid_polkadot_address(address: str) -> bool:
    """Check that an address looks like an SS58-encoded Polkadot address."""
    if not address:
        return False
    return bool(_POLKADOT_ADDRESS_PATTERN.match(normalize_address(address)))
