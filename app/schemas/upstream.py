"""Payloads exchanged with the listings and payments services."""
from pydantic import BaseModel, ConfigDict, Field


class ListingDetail(BaseModel):
    """Subset of GET /posts/{id} this service needs."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    price_per_day: float = Field(alias="pricePerDay", ge=0)
    owner_id: int = Field(alias="ownerId")
    title: str | None = None


class PaymentSessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_id: int = Field(alias="requestId")
    amount: float
    callback_url: str = Field(alias="callbackURL")


class PaymentSessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    redirect_url: str = Field(alias="redirectURL")
