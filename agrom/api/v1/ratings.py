from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from agrom.api.deps import get_policy, get_rating_service
from agrom.core.access.policy import ViewerPolicy
from agrom.core.reputation.aggregator import aggregate
from agrom.core.reputation.schemas import Rating, RatingForm, RatingSummary
from agrom.core.reputation.service import RatingService

router = APIRouter(tags=["Ratings"])


class RatingListResponse(BaseModel):
    ratings: list[Rating]
    # computed over the returned ratings only
    summary: RatingSummary


@router.get("/users/{user_id}/ratings", response_model=RatingListResponse)
async def list_user_ratings(
    user_id: str,
    limit: int | None = Query(None, ge=1, le=100),
    _: ViewerPolicy = Depends(get_policy),
    ratings: RatingService = Depends(get_rating_service),
):
    received = await ratings.list_received(user_id, limit=limit)
    return RatingListResponse(ratings=received, summary=aggregate(received))


@router.post("/ratings", response_model=Rating, status_code=201)
async def rate_user(
    body: RatingForm,
    policy: ViewerPolicy = Depends(get_policy),
    ratings: RatingService = Depends(get_rating_service),
):
    return await ratings.submit(policy, body)
