from fastapi import Depends, Header, Request, Response

from agrom.common.exceptions import AuthenticationRequiredError
from agrom.common.security import decode_token
from agrom.config import settings
from agrom.core.access.policy import ViewerPolicy
from agrom.core.listings.service import ListingService
from agrom.core.pricing.service import PricingService
from agrom.core.profiles.schemas import Identity, UserProfile
from agrom.core.profiles.service import ProfileService
from agrom.core.reputation.service import RatingService
from agrom.integrations.storage import StorageClient
from agrom.integrations.supabase import SupabaseClient


def get_access_token(
    request: Request,
    authorization: str | None = Header(None, description="Bearer <token>"),
) -> str | None:
    if authorization and authorization.startswith("Bearer "):
        return authorization[len("Bearer "):]
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_backend(token: str | None = Depends(get_access_token)) -> SupabaseClient:
    return SupabaseClient(access_token=token)


def get_storage(backend: SupabaseClient = Depends(get_backend)) -> StorageClient:
    return StorageClient(backend)


async def get_identity(token: str | None = Depends(get_access_token)) -> Identity:
    if not token:
        raise AuthenticationRequiredError()
    try:
        payload = decode_token(token)
    except ValueError:
        raise AuthenticationRequiredError("Sesión inválida o expirada")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationRequiredError("Sesión inválida")
    return Identity(id=user_id, email=payload.get("email"))


async def get_optional_identity(token: str | None = Depends(get_access_token)) -> Identity | None:
    try:
        return await get_identity(token)
    except AuthenticationRequiredError:
        return None


async def get_current_profile(
    identity: Identity = Depends(get_identity),
    backend: SupabaseClient = Depends(get_backend),
) -> UserProfile:
    return await ProfileService(backend).resolve(identity.id)


def get_policy(profile: UserProfile = Depends(get_current_profile)) -> ViewerPolicy:
    return ViewerPolicy(viewer_id=profile.id, role=profile.role)


def get_listing_service(backend: SupabaseClient = Depends(get_backend)) -> ListingService:
    return ListingService(backend)


def get_profile_service(backend: SupabaseClient = Depends(get_backend)) -> ProfileService:
    return ProfileService(backend)


def get_rating_service(backend: SupabaseClient = Depends(get_backend)) -> RatingService:
    return RatingService(backend)


def get_pricing_service(backend: SupabaseClient = Depends(get_backend)) -> PricingService:
    return PricingService(backend)


def set_session_cookie(response: Response, access_token: str, max_age: int | None = None) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        access_token,
        max_age=max_age,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
