import math
from datetime import date
from typing import Any
from urllib.parse import urlparse

from agrom.common.enums import ServiceType
from agrom.common.exceptions import ValidationFailedError
from agrom.core.listings.schemas import RequestForm, ServiceForm


def _positive_number(raw: str | float | None, message: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationFailedError(message)
    if not math.isfinite(value) or value <= 0:
        raise ValidationFailedError(message)
    return value


def _service_type(raw: str) -> str:
    if raw not in {t.value for t in ServiceType}:
        raise ValidationFailedError("Tipo de servicio inválido")
    return raw


def _video_url(raw: str) -> str | None:
    url = raw.strip()
    if not url:
        return None
    parsed = urlparse(url)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        raise ValidationFailedError("El enlace del video debe comenzar con http:// o https://")
    return url


def validate_service_form(form: ServiceForm) -> dict[str, Any]:
    title = form.title.strip()
    description = form.description.strip()
    coverage = form.coverage_area.strip()
    if not title or not description or not coverage:
        raise ValidationFailedError("Por favor completa todos los campos obligatorios")

    reference_price = None
    if form.reference_price not in (None, ""):
        reference_price = _positive_number(
            form.reference_price, "El precio de referencia debe ser un número positivo"
        )

    return {
        "service_type": _service_type(form.service_type),
        "title": title,
        "description": description,
        "coverage_area": coverage,
        "reference_price": reference_price,
        "video_url": _video_url(form.video_url),
    }


def validate_request_form(form: RequestForm) -> dict[str, Any]:
    location = form.location.strip()
    lot_id = (form.lot_id or "").strip() or None
    if form.hectares in (None, "") or not form.date_target or not (location or lot_id):
        raise ValidationFailedError("Los campos obligatorios deben completarse")

    hectares = _positive_number(form.hectares, "Las hectáreas deben ser un número positivo")

    try:
        date_target = date.fromisoformat(form.date_target)
    except ValueError:
        raise ValidationFailedError("La fecha tentativa no es válida")

    return {
        "service_type": _service_type(form.service_type),
        "hectares": hectares,
        "date_target": date_target.isoformat(),
        "free_location": location or None,
        "lot_id": lot_id,
    }
