import asyncio

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from agrom.api.deps import get_current_profile, get_listing_service, get_policy
from agrom.common.enums import FeedKind
from agrom.core.access.policy import ViewerPolicy
from agrom.core.listings.feed import FeedQuery
from agrom.core.listings.service import ListingService
from agrom.core.profiles.schemas import UserProfile
from agrom.web.templating import templates

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def home_page(
    request: Request,
    tab: str | None = None,
    query: FeedQuery = Depends(),
    profile: UserProfile = Depends(get_current_profile),
    policy: ViewerPolicy = Depends(get_policy),
    listings: ListingService = Depends(get_listing_service),
):
    tabs = policy.tabs
    kinds = [t.kind.value for t in tabs]
    active = tab if tab in kinds else (policy.default_tab.value if policy.default_tab else None)
    active_tab = next((t for t in tabs if t.kind.value == active), None)

    services, requests = await asyncio.gather(
        listings.list_services(policy, query),
        listings.list_requests(policy, query),
    )
    return templates.TemplateResponse(
        request,
        "home.html",
        {
            "profile": profile,
            "policy": policy,
            "tabs": tabs,
            "active": active,
            "active_tab": active_tab,
            "query": query,
            "feeds": {FeedKind.SERVICES.value: services, FeedKind.REQUESTS.value: requests},
        },
    )
