"""Append-only history of rent request status changes.
No updates or deletes - every record is permanent."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from app.database import Base
from app.models.rent_request import RentRequestStatus


class RentRequestEvent(Base):
    __tablename__ = "rent_request_events"

    id = Column(Integer, primary_key=True, index=True)
    rent_request_id = Column(Integer, ForeignKey("rent_requests.id"), nullable=False, index=True)

    # event: create | confirm | payment_success | payment_cancel | cancel | reconcile_reject
    event = Column(String(32), nullable=False, index=True)
    from_status = Column(SQLEnum(RentRequestStatus), nullable=True)  # None for create
    to_status = Column(SQLEnum(RentRequestStatus), nullable=False)
    message = Column(Text, nullable=False)

    # Optional structured data (e.g. payment_status, paid_request_id)
    meta = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)

    # None when the change came from the payment callback or reconciliation
    actor_user_id = Column(Integer, nullable=True)

    # UTC only - server_default
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
