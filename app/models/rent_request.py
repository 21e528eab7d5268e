"""Rent request: the single domain record of this service."""
from sqlalchemy import Column, Integer, Date, DateTime, Numeric, Enum as SQLEnum, CheckConstraint
from sqlalchemy.sql import func
from app.database import Base
import enum


class RentRequestStatus(str, enum.Enum):
    awaiting_confirmation = "awaiting_confirmation"
    confirmed = "confirmed"
    paid = "paid"
    rejected = "rejected"
    canceled = "canceled"


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    success = "success"
    canceled = "canceled"


# States a competing request can be in and still be rejected when another one is paid
LIVE_STATUSES = (RentRequestStatus.awaiting_confirmation, RentRequestStatus.confirmed)


class RentRequest(Base):
    __tablename__ = "rent_requests"
    __table_args__ = (CheckConstraint("start_date < end_date", name="ck_rent_requests_date_order"),)

    id = Column(Integer, primary_key=True, index=True)
    renter_id = Column(Integer, nullable=False, index=True)
    owner_id = Column(Integer, nullable=False, index=True)  # copied from the listing at creation
    listing_id = Column(Integer, nullable=False, index=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)

    status = Column(SQLEnum(RentRequestStatus), nullable=False, default=RentRequestStatus.awaiting_confirmation)
    payment_status = Column(SQLEnum(PaymentStatus), nullable=False, default=PaymentStatus.pending)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
