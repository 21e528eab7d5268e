"""Rent request endpoints: create, view, confirm, pay, cancel, payment callback."""
from fastapi import APIRouter, Depends, Query
from app.dependencies import get_current_user_id, get_rent_request_service
from app.schemas.rent_request import (
    RentRequestCreate,
    RentRequestCreated,
    RentRequestResponse,
    RentRequestEventResponse,
    PaymentRedirect,
    MessageResponse,
)
from app.services.rent_requests import RentRequestService

router = APIRouter(prefix="/rent-request", tags=["rent-request"])


@router.post("", response_model=RentRequestCreated, status_code=201)
def create_rent_request(
    data: RentRequestCreate,
    current_user_id: int = Depends(get_current_user_id),
    service: RentRequestService = Depends(get_rent_request_service),
):
    rent_request_id = service.create(current_user_id, data.listing_id, data.start_date, data.end_date)
    return RentRequestCreated(id=rent_request_id)


# Static paths must be registered before /{rent_request_id}


@router.get("/owner", response_model=list[RentRequestResponse])
def list_owner_rent_requests(
    status: str | None = Query(None, description="Filter by status, e.g. confirmed"),
    date: str | None = Query(None, description="created_at range: min,max (YYYY-MM-DD, either side optional)"),
    page: str | None = Query(None, description="1-based page; invalid values fall back to 1"),
    current_user_id: int = Depends(get_current_user_id),
    service: RentRequestService = Depends(get_rent_request_service),
):
    rents = service.list_for_owner(current_user_id, status, date, page)
    return [RentRequestResponse.model_validate(r) for r in rents]


@router.get("/renter", response_model=list[RentRequestResponse])
def list_renter_rent_requests(
    status: str | None = Query(None, description="Filter by status, e.g. paid"),
    date: str | None = Query(None, description="created_at range: min,max (YYYY-MM-DD, either side optional)"),
    page: str | None = Query(None, description="1-based page; invalid values fall back to 1"),
    current_user_id: int = Depends(get_current_user_id),
    service: RentRequestService = Depends(get_rent_request_service),
):
    rents = service.list_for_renter(current_user_id, status, date, page)
    return [RentRequestResponse.model_validate(r) for r in rents]


@router.get("/callback", response_model=MessageResponse)
def payment_callback(
    request_id: int = Query(..., alias="requestId"),
    status: str = Query(..., description="success | cancel"),
    service: RentRequestService = Depends(get_rent_request_service),
):
    """Called by the payment service (not user-authenticated) with the payment outcome."""
    return MessageResponse(message=service.handle_payment_callback(request_id, status))


@router.get("/{rent_request_id}", response_model=RentRequestResponse)
def get_rent_request(
    rent_request_id: int,
    current_user_id: int = Depends(get_current_user_id),
    service: RentRequestService = Depends(get_rent_request_service),
):
    return RentRequestResponse.model_validate(service.get_by_id(current_user_id, rent_request_id))


@router.get("/{rent_request_id}/history", response_model=list[RentRequestEventResponse])
def get_rent_request_history(
    rent_request_id: int,
    current_user_id: int = Depends(get_current_user_id),
    service: RentRequestService = Depends(get_rent_request_service),
):
    return [RentRequestEventResponse.model_validate(e) for e in service.history(current_user_id, rent_request_id)]


@router.put("/{rent_request_id}/confirm", response_model=MessageResponse)
def confirm_rent_request(
    rent_request_id: int,
    current_user_id: int = Depends(get_current_user_id),
    service: RentRequestService = Depends(get_rent_request_service),
):
    service.confirm(current_user_id, rent_request_id)
    return MessageResponse(message="the rent request has been confirmed successfully")


@router.put("/{rent_request_id}/pay", response_model=PaymentRedirect)
def pay_rent_request(
    rent_request_id: int,
    current_user_id: int = Depends(get_current_user_id),
    service: RentRequestService = Depends(get_rent_request_service),
):
    return PaymentRedirect(redirect_url=service.initiate_payment(current_user_id, rent_request_id))


@router.put("/{rent_request_id}/cancel", response_model=MessageResponse)
def cancel_rent_request(
    rent_request_id: int,
    current_user_id: int = Depends(get_current_user_id),
    service: RentRequestService = Depends(get_rent_request_service),
):
    service.cancel(current_user_id, rent_request_id)
    return MessageResponse(message="the rent request has been canceled successfully")
