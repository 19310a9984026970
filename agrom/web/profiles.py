from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from agrom.api.deps import (
    get_current_profile,
    get_identity,
    get_policy,
    get_profile_service,
    get_rating_service,
)
from agrom.common.exceptions import AgromException, NotFoundError
from agrom.core.access.policy import ViewerPolicy
from agrom.core.profiles.schemas import Identity, OnboardingForm, ProfileUpdate, UserProfile
from agrom.core.profiles.service import ProfileService
from agrom.core.reputation.aggregator import stored_reputation
from agrom.core.reputation.schemas import RatingForm
from agrom.core.reputation.service import RatingService
from agrom.web.templating import templates

router = APIRouter()


# ---------- Onboarding ----------


@router.get("/onboarding", response_class=HTMLResponse)
async def onboarding_page(
    request: Request,
    identity: Identity = Depends(get_identity),
    profiles: ProfileService = Depends(get_profile_service),
):
    if await profiles.get_profile(identity.id) is not None:
        return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    return templates.TemplateResponse(request, "onboarding.html", {"form": OnboardingForm()})


@router.post("/onboarding")
async def handle_onboarding(
    request: Request,
    name: str = Form(""),
    role: str = Form(""),
    base_location: str = Form(""),
    phone: str = Form(""),
    identity: Identity = Depends(get_identity),
    profiles: ProfileService = Depends(get_profile_service),
):
    form = OnboardingForm(name=name, role=role, base_location=base_location, phone=phone)
    try:
        await profiles.create_profile(identity.id, form)
    except AgromException as e:
        return templates.TemplateResponse(
            request, "onboarding.html", {"form": form, "error": e.detail}, status_code=e.status_code,
        )
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)


# ---------- Own profile ----------


def _own_profile_context(profile: UserProfile, **extra) -> dict:
    return {"profile": profile, "reputation": stored_reputation(profile), **extra}


@router.get("/profile", response_class=HTMLResponse)
async def profile_page(
    request: Request,
    saved: bool = False,
    profile: UserProfile = Depends(get_current_profile),
):
    message = "Perfil actualizado correctamente" if saved else None
    return templates.TemplateResponse(request, "profile.html", _own_profile_context(profile, message=message))


@router.post("/profile")
async def handle_profile_update(
    request: Request,
    name: str = Form(""),
    base_location: str = Form(""),
    phone: str = Form(""),
    profile: UserProfile = Depends(get_current_profile),
    profiles: ProfileService = Depends(get_profile_service),
):
    form = ProfileUpdate(name=name, base_location=base_location, phone=phone)
    try:
        await profiles.update_profile(profile, form)
    except AgromException as e:
        return templates.TemplateResponse(
            request, "profile.html", _own_profile_context(profile, error=e.detail), status_code=e.status_code,
        )
    return RedirectResponse(url="/profile?saved=true", status_code=status.HTTP_303_SEE_OTHER)


# ---------- Public profiles ----------


async def _render_public_profile(
    request: Request,
    user_id: str,
    policy: ViewerPolicy,
    profiles: ProfileService,
    show_all: bool = False,
    status_code: int = 200,
    **extra,
):
    view = await profiles.public_profile(user_id, policy, show_all=show_all)
    return templates.TemplateResponse(
        request, "users/detail.html", {"view": view, "show_all": show_all, **extra}, status_code=status_code,
    )


@router.get("/users/{user_id}", response_class=HTMLResponse)
async def user_page(
    request: Request,
    user_id: str,
    show_all: bool = False,
    rated: bool = False,
    policy: ViewerPolicy = Depends(get_policy),
    profiles: ProfileService = Depends(get_profile_service),
):
    message = "¡Valoración enviada!" if rated else None
    return await _render_public_profile(request, user_id, policy, profiles, show_all=show_all, message=message)


@router.post("/users/{user_id}/rate")
async def handle_rating(
    request: Request,
    user_id: str,
    stars: int | None = Form(None),
    comment: str = Form(""),
    as_role: str | None = Form(None),
    policy: ViewerPolicy = Depends(get_policy),
    profiles: ProfileService = Depends(get_profile_service),
    ratings: RatingService = Depends(get_rating_service),
):
    form = RatingForm(target_id=user_id, stars=stars, comment=comment, as_role=as_role or None)
    try:
        await ratings.submit(policy, form)
    except NotFoundError:
        raise
    except AgromException as e:
        return await _render_public_profile(
            request, user_id, policy, profiles, status_code=e.status_code, error=e.detail, comment=comment,
        )
    return RedirectResponse(url=f"/users/{user_id}?rated=true", status_code=status.HTTP_303_SEE_OTHER)
