# app/utils/dates.py
# Date rules for license records. Every predicate takes "today" explicitly.
import re
from datetime import date, datetime, timedelta

from app.errors import InvalidDateError

EXPIRATION_WINDOW = timedelta(days=10)

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_date(value) -> date:
    """Return ``value`` as a ``date``.

    Accepts ``date``/``datetime`` instances and ``YYYY-MM-DD`` strings,
    anything else raises ``InvalidDateError``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.fullmatch(value.strip()):
        raise InvalidDateError(f"Invalid date: {value!r}")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date: {value!r}") from exc


def is_valid_date(value) -> bool:
    try:
        parse_date(value)
    except InvalidDateError:
        return False
    return True


def compute_expiration(activation_date) -> date:
    """Activation date plus one calendar year (Feb 29 falls back to Feb 28)."""
    activated = parse_date(activation_date)
    try:
        return activated.replace(year=activated.year + 1)
    except ValueError:
        pass
    try:
        return activated.replace(year=activated.year + 1, day=28)
    except ValueError as exc:
        raise InvalidDateError(f"Cannot compute expiration for {activated.isoformat()}: {exc}") from exc


def is_expiring_soon(expiration_date, today) -> bool:
    expires = parse_date(expiration_date)
    today = parse_date(today)
    return today < expires and expires - today <= EXPIRATION_WINDOW


def is_expired(expiration_date, today) -> bool:
    return parse_date(expiration_date) < parse_date(today)


def expiry_alert(site, today):
    """Return "expired", "expiring_soon" or None for an active record."""
    if site.status != "active" or not site.expiration_date:
        return None
    if is_expired(site.expiration_date, today):
        return "expired"
    if is_expiring_soon(site.expiration_date, today):
        return "expiring_soon"
    return None


def format_date(value) -> str:
    if not value:
        return "-"
    try:
        return parse_date(value).strftime("%d %b %Y")
    except InvalidDateError:
        return str(value)
