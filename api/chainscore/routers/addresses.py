"""Address validation endpoint.

GET /api/v1/addresses/validate -- check both wallet addresses without scoring
"""

from typing import Optional

from fastapi import APIRouter

from chainscore.schemas.reputation import AddressCheck, AddressValidationResponse
from chainscore.services.addresses import is_valid_polkadot_address, is_valid_stellar_address

router = APIRouter(prefix="/api/v1", tags=["addresses"])


@router.get("/addresses/validate", response_model=AddressValidationResponse)
async def validate_addresses(
    stellar_address: Optional[str] = None,
    polkadot_address: Optional[str] = None,
) -> AddressValidationResponse:
    """Report whether each address is present and well-formed.

    Always 200: missing or malformed addresses are reported in the body.
    """
    stellar = AddressCheck(
        provided=bool(stellar_address),
        valid=bool(stellar_address) and is_valid_stellar_address(stellar_address),
    )
    polkadot = AddressCheck(
        provided=bool(polkadot_address),
        valid=bool(polkadot_address) and is_valid_polkadot_address(polkadot_address),
    )
    return AddressValidationResponse(
        stellar=stellar,
        polkadot=polkadot,
        can_scan=stellar.valid and polkadot.valid,
    )
