from fastapi import APIRouter, Depends

from agrom.api.deps import get_identity, get_pricing_service
from agrom.core.pricing.schemas import PriceTable
from agrom.core.pricing.service import ALL, PricingService
from agrom.core.profiles.schemas import Identity

router = APIRouter(prefix="/prices", tags=["Prices"])


@router.get("", response_model=PriceTable)
async def get_reference_prices(
    service_type: str = ALL,
    region: str = ALL,
    _: Identity = Depends(get_identity),
    pricing: PricingService = Depends(get_pricing_service),
):
    return await pricing.table(service_type, region)
