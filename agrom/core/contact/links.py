"""Deep links to the external messaging app.

Only builds the URL; opening it is up to the browser or the mobile client.
"""

import re
from urllib.parse import quote

DEFAULT_BASE_URL = "https://wa.me"

SERVICE_MESSAGE = 'Hola {name}, vi tu servicio "{title}" en Agrom y me interesa. ¿Podrías darme más información?'
REQUEST_MESSAGE = (
    'Hola {name}, vi tu solicitud de "{service_type}" en Agrom y me interesa. '
    "¿Podrías darme más información?"
)

# characters encodeURIComponent leaves alone
_UNRESERVED = "-_.!~*'()"


def normalize_phone(phone: str | None) -> str:
    return re.sub(r"[^0-9]", "", phone or "")


def build_contact_link(
    phone: str | None,
    template: str,
    base_url: str = DEFAULT_BASE_URL,
    **context: str,
) -> str | None:
    digits = normalize_phone(phone)
    if not digits:
        return None
    message = template.format(**context)
    return f"{base_url.rstrip('/')}/{digits}?text={quote(message, safe=_UNRESERVED)}"
