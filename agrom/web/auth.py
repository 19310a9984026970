from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from agrom.api.deps import (
    clear_session_cookie,
    get_backend,
    get_optional_identity,
    set_session_cookie,
)
from agrom.common.exceptions import AgromException
from agrom.common.logging import get_logger
from agrom.config import settings
from agrom.core.profiles.schemas import Identity, RegistrationForm
from agrom.core.profiles.validation import validate_registration
from agrom.integrations.supabase import SupabaseClient
from agrom.web.templating import templates

router = APIRouter(prefix="/auth")
logger = get_logger("web.auth")

INVALID_EMAIL = "Ingresa un correo electrónico válido"


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    registered: bool = False,
    identity: Identity | None = Depends(get_optional_identity),
):
    if identity:
        return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    message = "Registro exitoso. Revisa tu correo para confirmar tu cuenta." if registered else None
    return templates.TemplateResponse(request, "auth/login.html", {"message": message})


@router.post("/login")
async def handle_login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    backend: SupabaseClient = Depends(get_backend),
):
    if not email.strip() or not password:
        return templates.TemplateResponse(
            request, "auth/login.html",
            {"error": "Completa correo y contraseña", "email": email}, status_code=400,
        )
    try:
        session = await backend.sign_in_with_password(email.strip(), password)
    except AgromException as e:
        return templates.TemplateResponse(
            request, "auth/login.html", {"error": e.detail, "email": email}, status_code=e.status_code,
        )

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, session["access_token"], session.get("expires_in"))
    return response


@router.get("/register", response_class=HTMLResponse)
async def register_page(request: Request):
    return templates.TemplateResponse(request, "auth/register.html", {})


@router.post("/register")
async def handle_register(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    backend: SupabaseClient = Depends(get_backend),
):
    context = {"email": email}
    try:
        form = RegistrationForm(email=email.strip(), password=password, confirm_password=confirm_password)
    except ValidationError:
        return templates.TemplateResponse(
            request, "auth/register.html", {**context, "error": INVALID_EMAIL}, status_code=422,
        )
    try:
        validate_registration(form)
        await backend.sign_up(form.email, form.password)
    except AgromException as e:
        return templates.TemplateResponse(
            request, "auth/register.html", {**context, "error": e.detail}, status_code=e.status_code,
        )
    return RedirectResponse(url="/auth/login?registered=true", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/reset-password", response_class=HTMLResponse)
async def reset_page(request: Request):
    return templates.TemplateResponse(request, "auth/reset.html", {})


@router.post("/reset-password")
async def handle_reset(
    request: Request,
    email: str = Form(""),
    backend: SupabaseClient = Depends(get_backend),
):
    if "@" not in email:
        return templates.TemplateResponse(
            request, "auth/reset.html", {"error": INVALID_EMAIL, "email": email}, status_code=422,
        )
    try:
        await backend.reset_password_for_email(email.strip(), f"{settings.APP_URL}/auth/reset-password")
    except AgromException as e:
        return templates.TemplateResponse(
            request, "auth/reset.html", {"error": e.detail, "email": email}, status_code=e.status_code,
        )
    return templates.TemplateResponse(
        request, "auth/reset.html",
        {"message": "Te enviamos un correo con las instrucciones para recuperar tu contraseña."},
    )


@router.post("/logout")
async def handle_logout(
    identity: Identity | None = Depends(get_optional_identity),
    backend: SupabaseClient = Depends(get_backend),
):
    if identity:
        try:
            await backend.sign_out()
        except AgromException as e:
            # the local session is dropped regardless
            logger.error("Sign-out failed for %s: %s", identity.id, e.detail)
    response = RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(response)
    return response
