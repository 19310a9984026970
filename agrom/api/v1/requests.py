from fastapi import APIRouter, Depends
from pydantic import BaseModel

from agrom.api.deps import get_listing_service, get_policy
from agrom.common.enums import FeedScope
from agrom.core.access.policy import ViewerPolicy
from agrom.core.listings.feed import FeedQuery
from agrom.core.listings.schemas import Lot, RequestDetail, RequestForm, WorkRequest
from agrom.core.listings.service import ListingService, describe_request

router = APIRouter(tags=["Requests"])


class RequestFeedResponse(BaseModel):
    items: list[WorkRequest]
    total: int
    scope: FeedScope
    can_create: bool


@router.get("/requests", response_model=RequestFeedResponse)
async def list_requests(
    query: FeedQuery = Depends(),
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    items = await listings.list_requests(policy, query)
    return RequestFeedResponse(
        items=items, total=len(items), scope=policy.request_scope, can_create=policy.can_create_request,
    )


@router.post("/requests", response_model=WorkRequest, status_code=201)
async def create_request(
    body: RequestForm,
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    return await listings.create_request(policy, body)


@router.get("/requests/{request_id}", response_model=RequestDetail)
async def get_request(
    request_id: str,
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    request = await listings.get_request(request_id, policy)
    return describe_request(request, policy)


@router.get("/lots", response_model=list[Lot])
async def list_my_lots(
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    return await listings.list_lots(policy.viewer_id)
