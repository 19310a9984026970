from fastapi import APIRouter, Depends
from pydantic import BaseModel

from agrom.api.deps import get_listing_service, get_policy
from agrom.common.enums import FeedScope
from agrom.core.access.policy import ViewerPolicy
from agrom.core.listings.feed import FeedQuery
from agrom.core.listings.schemas import Service, ServiceDetail, ServiceForm
from agrom.core.listings.service import ListingService, describe_service

router = APIRouter(prefix="/services", tags=["Services"])


class ServiceFeedResponse(BaseModel):
    items: list[Service]
    total: int
    scope: FeedScope
    can_create: bool


@router.get("", response_model=ServiceFeedResponse)
async def list_services(
    query: FeedQuery = Depends(),
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    items = await listings.list_services(policy, query)
    return ServiceFeedResponse(
        items=items, total=len(items), scope=policy.service_scope, can_create=policy.can_create_service,
    )


@router.post("", response_model=Service, status_code=201)
async def create_service(
    body: ServiceForm,
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    return await listings.create_service(policy, body)


@router.get("/{service_id}", response_model=ServiceDetail)
async def get_service(
    service_id: str,
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    service = await listings.get_service(service_id, policy)
    return describe_service(service, policy)
