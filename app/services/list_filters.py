"""Query-string parsing for the owner/renter list views."""
from __future__ import annotations

import re
from datetime import date

from app.exceptions import InvalidInputError
from app.models.rent_request import RentRequestStatus

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z])")

# OFFSET must fit a 64-bit integer
MAX_PAGE = 1_000_000

_STATUS_ALIASES = {
    "waiting_for_confirmation": RentRequestStatus.awaiting_confirmation,
    "cancelled": RentRequestStatus.canceled,
}


def parse_status(value: str | None) -> RentRequestStatus | None:
    """'confirmed', 'AwaitingConfirmation', 'awaiting confirmation' -> enum; blank -> None."""
    s = (value or "").strip()
    if not s:
        return None
    key = re.sub(r"[\s\-]+", "_", _CAMEL_BOUNDARY.sub("_", s)).lower()
    if key in _STATUS_ALIASES:
        return _STATUS_ALIASES[key]
    try:
        return RentRequestStatus(key)
    except ValueError:
        allowed = ", ".join(st.value for st in RentRequestStatus)
        raise InvalidInputError(f"Invalid status '{s}'. Allowed: {allowed}") from None


def _parse_iso(part: str, label: str) -> date | None:
    part = part.strip()
    if not part:
        return None
    try:
        return date.fromisoformat(part)
    except ValueError:
        raise InvalidInputError(f"Invalid {label} date") from None


def parse_date_range(value: str | None) -> tuple[date | None, date | None]:
    """'2024-06-01,2024-06-30', '2024-06-01,' or ',2024-06-30'. A value without a comma is a minimum date."""
    s = (value or "").strip()
    if not s:
        return None, None
    parts = s.split(",")
    if len(parts) > 2:
        raise InvalidInputError("date must be two comma-separated dates: min,max")
    min_date = _parse_iso(parts[0], "minimum")
    max_date = _parse_iso(parts[1], "maximum") if len(parts) == 2 else None
    if min_date and max_date and min_date > max_date:
        raise InvalidInputError("Minimum date cannot be greater than maximum date")
    return min_date, max_date


def parse_page(value: str | int | None) -> int:
    """1-based page; missing, non-numeric or < 1 falls back to 1, anything above MAX_PAGE is MAX_PAGE."""
    try:
        page = int(str(value).strip())
    except (TypeError, ValueError):
        return 1
    if page < 1:
        return 1
    return min(page, MAX_PAGE)
