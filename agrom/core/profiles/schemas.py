from datetime import datetime

from pydantic import BaseModel, EmailStr, field_validator


def single_embed(value):
    """Embedded relations arrive as an object or a one-element list depending on the join."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


class UserProfile(BaseModel):
    id: str
    name: str | None = None
    role: str | None = None
    base_location: str | None = None
    phone: str | None = None
    avatar_url: str | None = None
    reputation_avg: float = 0
    reputation_count: int = 0
    created_at: datetime | None = None

    model_config = {"extra": "ignore"}

    @field_validator("reputation_avg", "reputation_count", mode="before")
    @classmethod
    def _none_is_zero(cls, v):
        return 0 if v is None else v

    @property
    def display_name(self) -> str:
        return self.name or "Usuario"

    @property
    def initials(self) -> str:
        words = self.display_name.split()
        return "".join(w[0] for w in words).upper()[:2]


class Identity(BaseModel):
    """Authenticated caller as stated by a verified access token."""

    id: str
    email: str | None = None


class OnboardingForm(BaseModel):
    name: str = ""
    role: str = ""
    base_location: str = ""
    phone: str = ""


class ProfileUpdate(BaseModel):
    name: str = ""
    base_location: str = ""
    phone: str = ""

    # role is fixed at onboarding
    model_config = {"extra": "forbid"}


class RegistrationForm(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str


class LoginForm(BaseModel):
    email: EmailStr
    password: str


class PasswordResetForm(BaseModel):
    email: EmailStr
