"""Shared dependencies: DB session, current user id, service wiring."""
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.config import get_settings
from app.database import get_db
from app.repositories.rent_requests import RentRequestRepository
from app.services.auth import decode_token_with_error
from app.services.listings import ListingClient
from app.services.payments import PaymentClient
from app.services.rent_requests import RentRequestService

security = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> int:
    if not credentials:
        raise HTTPException(status_code=401, detail="You are not logged in.")
    token_str = (credentials.credentials or "").strip()
    claims, _ = decode_token_with_error(token_str)
    if not claims:
        raise HTTPException(status_code=401, detail="Invalid or expired token.")
    return claims.user_id


def get_listing_client() -> ListingClient:
    return ListingClient(get_settings())


def get_payment_client() -> PaymentClient:
    return PaymentClient(get_settings())


def get_rent_request_service(
    db: Session = Depends(get_db),
    listings: ListingClient = Depends(get_listing_client),
    payments: PaymentClient = Depends(get_payment_client),
) -> RentRequestService:
    return RentRequestService(RentRequestRepository(db), listings, payments, get_settings())
