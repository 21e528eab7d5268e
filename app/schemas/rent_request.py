"""Rent request schemas (HTTP bodies and responses)."""
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field
from app.models.rent_request import RentRequestStatus, PaymentStatus


class RentRequestCreate(BaseModel):
    # Accepts the peer services' camelCase (postId/startDate/endDate) as well as snake_case.
    # Date ordering is checked by RentRequestService.create (400, not 422).
    model_config = ConfigDict(populate_by_name=True)

    listing_id: int = Field(alias="postId", gt=0)
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")


class RentRequestCreated(BaseModel):
    id: int


class RentRequestResponse(BaseModel):
    """What either party sees; never carries the other party's id."""
    model_config = ConfigDict(from_attributes=True)

    start_date: date
    end_date: date
    total_price: float
    status: RentRequestStatus
    payment_status: PaymentStatus


class RentRequestEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event: str
    from_status: RentRequestStatus | None = None
    to_status: RentRequestStatus
    message: str
    created_at: datetime | None = None


class PaymentRedirect(BaseModel):
    redirect_url: str


class MessageResponse(BaseModel):
    message: str
