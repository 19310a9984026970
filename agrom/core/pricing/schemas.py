from datetime import datetime

from pydantic import BaseModel

from agrom.common.enums import service_type_label


class ReferencePrice(BaseModel):
    service_type: str
    region: str
    price_avg: float
    source: str
    created_at: datetime | None = None

    model_config = {"extra": "ignore"}

    @property
    def type_label(self) -> str:
        return service_type_label(self.service_type)

    @property
    def source_label(self) -> str:
        return "Manual" if self.source == "manual" else "Publicaciones"


class PriceOverview(BaseModel):
    total: int
    regions: list[str]
    average_price: int


class PriceTable(BaseModel):
    prices: list[ReferencePrice]
    overview: PriceOverview
    service_type: str
    region: str
