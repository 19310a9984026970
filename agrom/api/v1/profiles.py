from fastapi import APIRouter, Depends
from pydantic import BaseModel

from agrom.api.deps import (
    get_current_profile,
    get_identity,
    get_policy,
    get_profile_service,
)
from agrom.common.enums import FeedKind, FeedScope
from agrom.common.exceptions import ConflictError
from agrom.core.access.policy import ViewerPolicy
from agrom.core.profiles.schemas import Identity, OnboardingForm, ProfileUpdate, UserProfile
from agrom.core.profiles.service import ProfileService, PublicProfile

router = APIRouter(tags=["Profiles"])


# ---------- Schemas ----------


class TabResponse(BaseModel):
    kind: FeedKind
    label: str
    scope: FeedScope


class PermissionsResponse(BaseModel):
    role: str | None
    tabs: list[TabResponse]
    default_tab: FeedKind | None
    can_create_service: bool
    can_create_request: bool


# ---------- Endpoints ----------


@router.post("/profiles", response_model=UserProfile, status_code=201)
async def complete_onboarding(
    body: OnboardingForm,
    identity: Identity = Depends(get_identity),
    profiles: ProfileService = Depends(get_profile_service),
):
    if await profiles.get_profile(identity.id) is not None:
        raise ConflictError("El perfil ya existe")
    return await profiles.create_profile(identity.id, body)


@router.get("/profiles/me", response_model=UserProfile)
async def get_my_profile(profile: UserProfile = Depends(get_current_profile)):
    return profile


@router.patch("/profiles/me", response_model=UserProfile)
async def update_my_profile(
    body: ProfileUpdate,
    profile: UserProfile = Depends(get_current_profile),
    profiles: ProfileService = Depends(get_profile_service),
):
    return await profiles.update_profile(profile, body)


@router.get("/profiles/me/permissions", response_model=PermissionsResponse)
async def get_my_permissions(
    profile: UserProfile = Depends(get_current_profile),
    policy: ViewerPolicy = Depends(get_policy),
):
    return PermissionsResponse(
        role=profile.role,
        tabs=[TabResponse(kind=t.kind, label=t.label, scope=t.scope) for t in policy.tabs],
        default_tab=policy.default_tab,
        can_create_service=policy.can_create_service,
        can_create_request=policy.can_create_request,
    )


@router.get("/users/{user_id}", response_model=PublicProfile)
async def get_user_profile(
    user_id: str,
    show_all: bool = False,
    policy: ViewerPolicy = Depends(get_policy),
    profiles: ProfileService = Depends(get_profile_service),
):
    return await profiles.public_profile(user_id, policy, show_all=show_all)
