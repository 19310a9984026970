from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from agrom.api.deps import (
    clear_session_cookie,
    get_backend,
    get_identity,
    set_session_cookie,
)
from agrom.common.logging import get_logger
from agrom.config import settings
from agrom.core.profiles.schemas import Identity, LoginForm, PasswordResetForm, RegistrationForm
from agrom.core.profiles.validation import validate_registration
from agrom.integrations.supabase import SupabaseClient

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = get_logger("api.auth")


# ---------- Schemas ----------


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    user_id: str | None = None


class MessageResponse(BaseModel):
    message: str


# ---------- Endpoints ----------


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(body: RegistrationForm, backend: SupabaseClient = Depends(get_backend)):
    validate_registration(body)
    await backend.sign_up(body.email, body.password)
    return MessageResponse(message="¡Registro exitoso! Revisa tu correo para confirmar tu cuenta.")


@router.post("/login", response_model=SessionResponse)
async def login(body: LoginForm, response: Response, backend: SupabaseClient = Depends(get_backend)):
    session = await backend.sign_in_with_password(body.email, body.password)
    logger.info("API session opened for %s", body.email)
    set_session_cookie(response, session["access_token"], session.get("expires_in"))
    return SessionResponse(
        access_token=session["access_token"],
        expires_in=session.get("expires_in"),
        user_id=(session.get("user") or {}).get("id"),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    _: Identity = Depends(get_identity),
    backend: SupabaseClient = Depends(get_backend),
):
    await backend.sign_out()
    clear_session_cookie(response)
    return MessageResponse(message="Sesión cerrada correctamente")


@router.post("/reset", response_model=MessageResponse)
async def reset_password(body: PasswordResetForm, backend: SupabaseClient = Depends(get_backend)):
    await backend.reset_password_for_email(body.email, f"{settings.APP_URL}/auth/reset-password")
    return MessageResponse(message="Correo de recuperación enviado")


@router.get("/me", response_model=Identity)
async def get_me(identity: Identity = Depends(get_identity)):
    return identity
