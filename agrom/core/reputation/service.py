from agrom.common.enums import UserRole
from agrom.common.exceptions import NotFoundError, PermissionDeniedError, ValidationFailedError
from agrom.common.logging import get_logger
from agrom.core.access.policy import ViewerPolicy, coerce_role
from agrom.core.profiles.schemas import UserProfile
from agrom.core.reputation.schemas import Rating, RatingForm
from agrom.integrations.supabase import SupabaseClient

logger = get_logger("reputation.service")

RATING_COLUMNS = "id, author_id, target_id, stars, comment, created_at, author:author_id(id, name, role)"


def validate_rating(form: RatingForm) -> None:
    if form.stars is None or not 1 <= form.stars <= 5:
        raise ValidationFailedError("Por favor selecciona una calificación")


def rated_role(target: UserProfile, as_role: str | None) -> str | None:
    """Role the target is rated in. It must be one the target actually holds."""
    if not as_role:
        return target.role
    wanted = coerce_role(as_role)
    held = coerce_role(target.role)
    if wanted is None or held is None:
        return None
    if held == wanted or held == UserRole.BOTH:
        return wanted.value
    return None


class RatingService:
    def __init__(self, backend: SupabaseClient):
        self.backend = backend

    async def list_received(self, user_id: str, limit: int | None = None) -> list[Rating]:
        rows = await self.backend.select(
            "ratings", columns=RATING_COLUMNS, filters={"target_id": user_id}, limit=limit,
        )
        return [Rating.model_validate(row) for row in rows]

    async def submit(self, policy: ViewerPolicy, form: RatingForm) -> Rating:
        validate_rating(form)

        row = await self.backend.select_one("users_public", filters={"id": form.target_id})
        if row is None:
            raise NotFoundError("Usuario", form.target_id)
        target = UserProfile.model_validate(row)

        subject_role = rated_role(target, form.as_role)
        reason = policy.rating_denial_reason(subject_role, target.id)
        if reason:
            logger.info("Rating refused: %s -> %s (%s)", policy.viewer_id, target.id, reason)
            raise PermissionDeniedError(reason)

        created = await self.backend.insert(
            "ratings",
            {
                "author_id": policy.viewer_id,
                "target_id": target.id,
                "stars": form.stars,
                "comment": form.comment.strip() or None,
            },
        )
        logger.info("Rating stored: %s -> %s (%d stars)", policy.viewer_id, target.id, form.stars)
        return Rating.model_validate(created)
