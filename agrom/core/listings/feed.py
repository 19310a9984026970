"""In-memory filtering of the listing feeds.

Feeds are small and already scoped by the backend query, so search, type and
location filters run over the fetched list. Filtering never reorders or
mutates its input and applying the same query twice changes nothing.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import BaseModel

from agrom.common.enums import FeedScope, RequestStatus, ServiceStatus
from agrom.core.listings.schemas import Service, WorkRequest

ALL_TYPES = "all"


class FeedQuery(BaseModel):
    search: str = ""
    service_type: str = ALL_TYPES
    location: str = ""

    @property
    def is_identity(self) -> bool:
        return not self.search.strip() and self.service_type in ("", ALL_TYPES) and not self.location.strip()


def _contains(haystacks: Iterable[str | None], needle: str) -> bool:
    needle = needle.strip().lower()
    if not needle:
        return True
    return any(needle in h.lower() for h in haystacks if h)


def _type_matches(service_type: str, wanted: str) -> bool:
    return wanted in ("", ALL_TYPES) or service_type == wanted


def service_matches(service: Service, query: FeedQuery) -> bool:
    contractor_location = service.contractor.base_location if service.contractor else None
    return (
        _contains([service.title, service.description], query.search)
        and _type_matches(service.service_type, query.service_type)
        and _contains([service.coverage_area, contractor_location], query.location)
    )


def request_matches(request: WorkRequest, query: FeedQuery) -> bool:
    lot_name = request.lot.name if request.lot else None
    lot_location = request.lot.location if request.lot else None
    return (
        _contains([request.title, request.free_location, lot_name, lot_location], query.search)
        and _type_matches(request.service_type, query.service_type)
        and _contains([request.free_location, lot_location], query.location)
    )


def filter_services(items: Sequence[Service], query: FeedQuery) -> list[Service]:
    return [s for s in items if service_matches(s, query)]


def filter_requests(items: Sequence[WorkRequest], query: FeedQuery) -> list[WorkRequest]:
    return [r for r in items if request_matches(r, query)]


def service_scope_filters(scope: FeedScope, viewer_id: str) -> dict[str, Any] | None:
    """Backend equality filters for the services feed, None when nothing is visible."""
    if scope == FeedScope.NONE:
        return None
    filters: dict[str, Any] = {"status": ServiceStatus.ACTIVE.value}
    if scope == FeedScope.OWN:
        filters["contractor_id"] = viewer_id
    return filters


def request_scope_filters(scope: FeedScope, viewer_id: str) -> dict[str, Any] | None:
    if scope == FeedScope.NONE:
        return None
    filters: dict[str, Any] = {"status": RequestStatus.PENDING.value}
    if scope == FeedScope.OWN:
        filters["producer_id"] = viewer_id
    return filters
