import asyncio

from pydantic import BaseModel

from agrom.common.exceptions import NotFoundError, ProfileMissingError
from agrom.common.logging import get_logger
from agrom.config import settings
from agrom.core.access.policy import ViewerPolicy, rating_criteria
from agrom.core.profiles.schemas import OnboardingForm, ProfileUpdate, UserProfile
from agrom.core.profiles.validation import validate_onboarding, validate_profile_update
from agrom.core.reputation.aggregator import aggregate, stored_reputation
from agrom.core.reputation.schemas import Rating, RatingSummary
from agrom.core.reputation.service import RatingService
from agrom.integrations.supabase import SupabaseClient

logger = get_logger("profiles.service")


class PublicProfile(BaseModel):
    profile: UserProfile
    # authoritative figure, shown as the headline
    reputation: RatingSummary
    # describes only the fetched ratings below
    fetched: RatingSummary
    ratings: list[Rating]
    hidden_ratings: int
    can_rate: bool
    rating_criteria: list[str]
    is_self: bool


class ProfileService:
    def __init__(self, backend: SupabaseClient):
        self.backend = backend

    async def get_profile(self, user_id: str) -> UserProfile | None:
        row = await self.backend.select_one("users_public", filters={"id": user_id})
        return UserProfile.model_validate(row) if row else None

    async def resolve(self, user_id: str) -> UserProfile:
        profile = await self.get_profile(user_id)
        if profile is None:
            logger.info("No profile yet for %s, onboarding required", user_id)
            raise ProfileMissingError()
        return profile

    async def create_profile(self, user_id: str, form: OnboardingForm) -> UserProfile:
        values = validate_onboarding(form)
        created = await self.backend.insert("users_public", {"id": user_id, **values})
        logger.info("Profile created for %s as %s", user_id, values["role"])
        return UserProfile.model_validate(created)

    async def update_profile(self, profile: UserProfile, form: ProfileUpdate) -> UserProfile:
        values = validate_profile_update(form)
        rows = await self.backend.update("users_public", values, filters={"id": profile.id})
        if not rows:
            raise NotFoundError("Usuario", profile.id)
        return UserProfile.model_validate(rows[0])

    async def public_profile(
        self, user_id: str, policy: ViewerPolicy, show_all: bool = False,
    ) -> PublicProfile:
        profile, ratings = await asyncio.gather(
            self.get_profile(user_id),
            RatingService(self.backend).list_received(user_id),
        )
        if profile is None:
            raise NotFoundError("Usuario", user_id)

        shown = ratings if show_all else ratings[: settings.RATINGS_PREVIEW_LIMIT]
        return PublicProfile(
            profile=profile,
            reputation=stored_reputation(profile),
            fetched=aggregate(ratings),
            ratings=shown,
            hidden_ratings=len(ratings) - len(shown),
            can_rate=policy.can_rate(profile.role, profile.id),
            rating_criteria=rating_criteria(profile.role),
            is_self=profile.id == policy.viewer_id,
        )
