from datetime import date, datetime

from pydantic import BaseModel, field_validator

from agrom.common.enums import RequestStatus, ServiceStatus, service_type_label
from agrom.core.profiles.schemas import UserProfile, single_embed
from agrom.core.reputation.schemas import RatingSummary


class Lot(BaseModel):
    id: str
    owner_id: str | None = None
    name: str = ""
    location: str = ""
    surface_total_ha: float | None = None

    model_config = {"extra": "ignore"}


class Service(BaseModel):
    id: str
    contractor_id: str
    title: str
    description: str | None = None
    service_type: str
    coverage_area: str | None = None
    reference_price: float | None = None
    images: list[str] = []
    video_url: str | None = None
    status: str = ServiceStatus.ACTIVE.value
    created_at: datetime | None = None
    contractor: UserProfile | None = None

    model_config = {"extra": "ignore"}

    normalize_contractor = field_validator("contractor", mode="before")(single_embed)

    @field_validator("images", mode="before")
    @classmethod
    def _images_list(cls, v):
        return v or []

    @property
    def type_label(self) -> str:
        return service_type_label(self.service_type)


class WorkRequest(BaseModel):
    """A job posting published by a producer (the ``requests`` collection)."""

    id: str
    producer_id: str
    contractor_id: str | None = None
    service_id: str | None = None
    service_type: str
    hectares: float
    date_target: date
    lot_id: str | None = None
    free_location: str | None = None
    status: str = RequestStatus.PENDING.value
    created_at: datetime | None = None
    producer: UserProfile | None = None
    lot: Lot | None = None

    model_config = {"extra": "ignore"}

    normalize_embeds = field_validator("producer", "lot", mode="before")(single_embed)

    @property
    def type_label(self) -> str:
        return service_type_label(self.service_type)

    @property
    def title(self) -> str:
        return f"Solicitud de {self.service_type}"

    @property
    def location(self) -> str:
        if self.lot is not None:
            return self.lot.location
        return self.free_location or ""


class ServiceForm(BaseModel):
    service_type: str = "siembra"
    title: str = ""
    description: str = ""
    coverage_area: str = ""
    reference_price: str | float | None = None
    video_url: str = ""


class RequestForm(BaseModel):
    service_type: str = "siembra"
    hectares: str | float | None = None
    date_target: str = ""
    location: str = ""
    lot_id: str | None = None


class ListingDetail(BaseModel):
    contact_link: str | None
    can_rate: bool
    rating_criteria: list[str]
    is_owner: bool
    # stored figures of the listing owner, rounded for display
    owner_reputation: RatingSummary | None = None


class ServiceDetail(ListingDetail):
    service: Service


class RequestDetail(ListingDetail):
    request: WorkRequest
