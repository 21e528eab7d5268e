from app.schemas.auth import TokenClaims
from app.schemas.rent_request import (
    RentRequestCreate,
    RentRequestCreated,
    RentRequestResponse,
    RentRequestEventResponse,
    PaymentRedirect,
    MessageResponse,
)
from app.schemas.upstream import ListingDetail, PaymentSessionRequest, PaymentSessionResponse
