"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table; no migration scripts needed for fresh installs.
"""
from app.models.rent_request import RentRequest, RentRequestStatus, PaymentStatus
from app.models.rent_request_event import RentRequestEvent

__all__ = [
    "RentRequest",
    "RentRequestStatus",
    "PaymentStatus",
    "RentRequestEvent",
]
