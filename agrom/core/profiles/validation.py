from typing import Any

from agrom.common.enums import UserRole
from agrom.common.exceptions import ValidationFailedError
from agrom.config import settings
from agrom.core.profiles.schemas import OnboardingForm, ProfileUpdate, RegistrationForm


def password_hint() -> str:
    return f"Contraseña (mínimo {settings.PASSWORD_MIN_LENGTH} caracteres)"


def validate_registration(form: RegistrationForm) -> None:
    if form.password != form.confirm_password:
        raise ValidationFailedError("Las contraseñas no coinciden")
    if len(form.password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationFailedError(
            f"La contraseña debe tener al menos {settings.PASSWORD_MIN_LENGTH} caracteres"
        )


def validate_onboarding(form: OnboardingForm) -> dict[str, Any]:
    name = form.name.strip()
    base_location = form.base_location.strip()
    phone = form.phone.strip()

    if not name:
        raise ValidationFailedError("El nombre es requerido")
    if form.role not in {r.value for r in UserRole}:
        raise ValidationFailedError("Selecciona un rol válido")
    if not base_location:
        raise ValidationFailedError("La ubicación es requerida")
    if not phone:
        raise ValidationFailedError("El teléfono es requerido")

    return {"name": name, "role": form.role, "base_location": base_location, "phone": phone}


def validate_profile_update(form: ProfileUpdate) -> dict[str, Any]:
    name = form.name.strip()
    if not name:
        raise ValidationFailedError("El nombre es requerido")
    return {
        "name": name,
        "base_location": form.base_location.strip() or None,
        "phone": form.phone.strip() or None,
    }
