"""Reference prices.

The averages themselves are computed by the backend (``get_reference_prices``
/ ``update_reference_prices``). This module only requests, filters and
summarizes the rows for display.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from agrom.common.logging import get_logger
from agrom.core.pricing.schemas import PriceOverview, PriceTable, ReferencePrice
from agrom.integrations.supabase import SupabaseClient

logger = get_logger("pricing.service")

ALL = "all"


def _or_none(value: str) -> str | None:
    return None if value in ("", ALL) else value


def filter_prices(prices: Sequence[ReferencePrice], service_type: str = ALL, region: str = ALL) -> list[ReferencePrice]:
    wanted_region = (_or_none(region) or "").lower()
    return [
        p for p in prices
        if (_or_none(service_type) is None or p.service_type == service_type)
        and wanted_region in p.region.lower()
    ]


def unique_regions(prices: Sequence[ReferencePrice]) -> list[str]:
    return list(dict.fromkeys(p.region for p in prices))


def overview(prices: Sequence[ReferencePrice]) -> PriceOverview:
    average = 0
    if prices:
        mean = Decimal(str(sum(p.price_avg for p in prices) / len(prices)))
        average = int(mean.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return PriceOverview(total=len(prices), regions=unique_regions(prices), average_price=average)


class PricingService:
    def __init__(self, backend: SupabaseClient):
        self.backend = backend

    async def fetch(self, service_type: str = ALL, region: str = ALL) -> list[ReferencePrice]:
        rows = await self.backend.rpc(
            "get_reference_prices",
            {"p_service_type": _or_none(service_type), "p_region": _or_none(region)},
        )
        return [ReferencePrice.model_validate(row) for row in rows or []]

    async def table(self, service_type: str = ALL, region: str = ALL) -> PriceTable:
        prices = await self.fetch(service_type, region)
        return PriceTable(
            prices=filter_prices(prices, service_type, region),
            overview=overview(prices),
            service_type=service_type or ALL,
            region=region or ALL,
        )

    async def refresh(self) -> None:
        await self.backend.rpc("update_reference_prices")
        logger.info("Reference prices recomputed")
