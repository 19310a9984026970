from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from agrom.api.deps import get_current_profile, get_pricing_service
from agrom.common.exceptions import ExternalServiceError
from agrom.core.pricing.service import ALL, PricingService
from agrom.core.profiles.schemas import UserProfile
from agrom.web.templating import templates

router = APIRouter()


@router.get("/prices", response_class=HTMLResponse)
async def prices_page(
    request: Request,
    service_type: str = ALL,
    region: str = ALL,
    _: UserProfile = Depends(get_current_profile),
    pricing: PricingService = Depends(get_pricing_service),
):
    table, error = None, None
    try:
        table = await pricing.table(service_type, region)
    except ExternalServiceError as e:
        error = e.detail
    return templates.TemplateResponse(
        request,
        "prices.html",
        {"table": table, "error": error, "service_type": service_type, "region": region},
    )
