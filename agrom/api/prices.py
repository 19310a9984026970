from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from agrom.api.deps import get_optional_identity, get_pricing_service
from agrom.common.exceptions import ExternalServiceError
from agrom.common.logging import get_logger
from agrom.core.pricing.service import PricingService
from agrom.core.profiles.schemas import Identity

router = APIRouter(prefix="/api", tags=["Prices"])
logger = get_logger("api.prices")


@router.post("/update-prices")
async def update_prices(
    identity: Identity | None = Depends(get_optional_identity),
    pricing: PricingService = Depends(get_pricing_service),
):
    """Recompute the reference prices. Response bodies are consumed by the prices page script."""
    if identity is None:
        return JSONResponse({"error": "No autorizado"}, status_code=401)
    try:
        await pricing.refresh()
    except ExternalServiceError as exc:
        logger.error("Reference price refresh requested by %s failed: %s", identity.id, exc.detail)
        return JSONResponse({"error": "Error al actualizar precios"}, status_code=500)
    return {"success": True, "message": "Precios actualizados correctamente"}
