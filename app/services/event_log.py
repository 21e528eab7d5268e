"""Append-only rent request history. Never update or delete - immutable trail of status changes."""
from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from app.models.rent_request import RentRequestStatus
from app.models.rent_request_event import RentRequestEvent

# Column limits (match model)
_EVENT_LEN = 32
_MESSAGE_LEN = 10_000


def _sanitize_meta_value(v: Any) -> Any:
    """Convert to JSON-serializable value so meta never raises on INSERT."""
    if v is None:
        return None
    if isinstance(v, (str, int, float, bool)):
        return v
    if isinstance(v, Decimal):
        return str(v)
    if isinstance(v, (datetime, date)):
        return v.isoformat()
    if isinstance(v, enum.Enum):
        return getattr(v, "value", str(v))
    if isinstance(v, dict):
        return {str(k): _sanitize_meta_value(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_sanitize_meta_value(x) for x in v]
    return str(v)


def record_event(
    db: Session,
    rent_request_id: int,
    event: str,
    to_status: RentRequestStatus,
    message: str,
    *,
    from_status: RentRequestStatus | None = None,
    actor_user_id: int | None = None,
    meta: dict[str, Any] | None = None,
) -> RentRequestEvent:
    """Append one history record. Commit remains with the caller so the event
    lands in the same transaction as the status change it describes."""
    entry = RentRequestEvent(
        rent_request_id=rent_request_id,
        event=(event or "")[:_EVENT_LEN],
        from_status=from_status,
        to_status=to_status,
        message=(message or "")[:_MESSAGE_LEN].strip() or "-",
        actor_user_id=actor_user_id,
        meta={str(k): _sanitize_meta_value(v) for k, v in meta.items()} if meta else None,
    )
    db.add(entry)
    db.flush()
    return entry


def list_events(db: Session, rent_request_id: int) -> list[RentRequestEvent]:
    return (
        db.query(RentRequestEvent)
        .filter(RentRequestEvent.rent_request_id == rent_request_id)
        .order_by(RentRequestEvent.id)
        .all()
    )
