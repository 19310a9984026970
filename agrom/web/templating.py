from datetime import date, datetime
from pathlib import Path

from fastapi.templating import Jinja2Templates

from agrom.common.enums import SERVICE_TYPE_LABELS, UserRole
from agrom.core.profiles.validation import password_hint

BASE_DIR = Path(__file__).resolve().parent.parent

templates = Jinja2Templates(directory=BASE_DIR / "templates")


def format_date(value: date | datetime | None) -> str:
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")


def format_price(value: float | int | None) -> str:
    """Argentine peso amounts, dot as thousands separator."""
    if value is None:
        return ""
    return "$ " + f"{int(round(value)):,}".replace(",", ".")


templates.env.filters["fecha"] = format_date
templates.env.filters["precio"] = format_price
templates.env.globals["service_types"] = SERVICE_TYPE_LABELS
templates.env.globals["roles"] = [r.value for r in UserRole]
templates.env.globals["password_hint"] = password_hint
