"""Rent request lifecycle: creation, confirmation, payment, cancellation and
reconciliation of competing requests once one of them is paid."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings, get_settings
from app.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    PersistenceError,
)
from app.models.rent_request import RentRequest, RentRequestStatus, PaymentStatus, LIVE_STATUSES
from app.models.rent_request_event import RentRequestEvent
from app.repositories.rent_requests import RentRequestRepository
from app.schemas.upstream import PaymentSessionRequest
from app.services.event_log import record_event, list_events
from app.services.list_filters import parse_status, parse_date_range, parse_page
from app.services.listings import ListingClient
from app.services.payments import PaymentClient, build_callback_url
from app.services.rent_transitions import RentEvent, RentState, apply_event, can_view

log = logging.getLogger("uvicorn.error")

CALLBACK_EVENTS = {
    "success": RentEvent.payment_success,
    "cancel": RentEvent.payment_cancel,
}

MSG_PAYMENT_SUCCESS = "Your payment was processed successfully!"
MSG_PAYMENT_CANCELED = "Your payment has been canceled"
MSG_PAYMENT_ALREADY_PROCESSED = "This payment has already been processed"


def rental_days(start_date: date, end_date: date) -> int:
    return (end_date - start_date).days


class RentRequestService:
    def __init__(
        self,
        repo: RentRequestRepository,
        listings: ListingClient,
        payments: PaymentClient,
        settings: Settings | None = None,
    ):
        self.repo = repo
        self.listings = listings
        self.payments = payments
        self.settings = settings or get_settings()

    @property
    def db(self):
        return self.repo.db

    @contextmanager
    def _unit_of_work(self):
        """Commit everything written inside the block, or nothing."""
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            log.exception("Rent request transaction failed")
            raise PersistenceError() from e
        except Exception:
            self.db.rollback()
            raise

    def _get(self, rent_request_id: int) -> RentRequest:
        record = self.repo.get_by_id(rent_request_id)
        if not record:
            raise NotFoundError("Rent request not found")
        return record

    def _transition(
        self,
        record: RentRequest,
        event: RentEvent,
        actor_id: int | None,
        message: str,
        meta: dict | None = None,
    ) -> RentState:
        """Validate `event` against the transition table and write it with a status compare-and-swap."""
        current = RentState.of(record)
        nxt = apply_event(current, event, actor_id)
        if not self.repo.transition(
            record.id,
            current.status,
            status=nxt.status,
            payment_status=nxt.payment_status,
        ):
            raise InvalidStateError("Rent request was modified by another operation, please retry")
        record_event(
            self.db,
            record.id,
            event.value,
            nxt.status,
            message,
            from_status=current.status,
            actor_user_id=actor_id,
            meta=meta,
        )
        return nxt

    # --- create -------------------------------------------------------------

    def create(self, renter_id: int, listing_id: int, start_date: date, end_date: date) -> int:
        """Create a request awaiting the owner's confirmation; returns its id."""
        if not start_date < end_date:
            raise InvalidInputError("Start date must be before end date")

        if self.repo.get_overlapping(listing_id, RentRequestStatus.paid, start_date, end_date):
            raise ConflictError()

        listing = self.listings.get_listing(listing_id)

        days = rental_days(start_date, end_date)
        if days <= 0:
            raise InvalidInputError("Rental must last at least one day")
        total_price = Decimal(days) * Decimal(str(listing.price_per_day))

        record = RentRequest(
            renter_id=renter_id,
            owner_id=listing.owner_id,
            listing_id=listing_id,
            start_date=start_date,
            end_date=end_date,
            total_price=total_price,
            status=RentRequestStatus.awaiting_confirmation,
            payment_status=PaymentStatus.pending,
        )
        with self._unit_of_work():
            rent_request_id = self.repo.add(record)
            record_event(
                self.db,
                rent_request_id,
                "create",
                RentRequestStatus.awaiting_confirmation,
                f"Rent request created for listing {listing_id}, {start_date}–{end_date}.",
                actor_user_id=renter_id,
                meta={"days": days, "price_per_day": listing.price_per_day, "total_price": total_price},
            )
        log.info(
            "Rent request %s created: listing=%s renter=%s owner=%s total=%s",
            rent_request_id, listing_id, renter_id, listing.owner_id, total_price,
        )
        return rent_request_id

    # --- reads --------------------------------------------------------------

    def get_by_id(self, user_id: int, rent_request_id: int) -> RentRequest:
        record = self._get(rent_request_id)
        if not can_view(RentState.of(record), user_id):
            raise ForbiddenError("Not your rent request")
        return record

    def history(self, user_id: int, rent_request_id: int) -> list[RentRequestEvent]:
        record = self.get_by_id(user_id, rent_request_id)
        return list_events(self.db, record.id)

    def list_for_owner(
        self,
        owner_id: int,
        status: str | None = None,
        date_range: str | None = None,
        page: str | int | None = None,
    ) -> list[RentRequest]:
        status_filter, min_date, max_date, offset, limit = self._list_params(status, date_range, page)
        return self.repo.list_by_owner(owner_id, status_filter, min_date, max_date, offset, limit)

    def list_for_renter(
        self,
        renter_id: int,
        status: str | None = None,
        date_range: str | None = None,
        page: str | int | None = None,
    ) -> list[RentRequest]:
        status_filter, min_date, max_date, offset, limit = self._list_params(status, date_range, page)
        return self.repo.list_by_renter(renter_id, status_filter, min_date, max_date, offset, limit)

    def _list_params(self, status, date_range, page):
        # All validation happens here, before any query runs
        status_filter = parse_status(status)
        min_date, max_date = parse_date_range(date_range)
        size = self.settings.page_size
        offset = (parse_page(page) - 1) * size
        return status_filter, min_date, max_date, offset, size

    # --- owner / renter transitions ----------------------------------------

    def confirm(self, owner_id: int, rent_request_id: int) -> None:
        record = self._get(rent_request_id)
        with self._unit_of_work():
            self._transition(record, RentEvent.confirm, owner_id, "Rent request confirmed by owner.")
        log.info("Rent request %s confirmed by owner %s", rent_request_id, owner_id)

    def cancel(self, renter_id: int, rent_request_id: int) -> None:
        record = self._get(rent_request_id)
        with self._unit_of_work():
            self._transition(record, RentEvent.cancel, renter_id, "Rent request canceled by renter.")
        log.info("Rent request %s canceled by renter %s", rent_request_id, renter_id)

    def initiate_payment(self, renter_id: int, rent_request_id: int) -> str:
        """Open a payment session for a confirmed request; returns the provider redirect URL.

        Status is not changed here; the payment callback drives it.
        """
        record = self._get(rent_request_id)
        apply_event(RentState.of(record), RentEvent.initiate_payment, renter_id)
        payload = PaymentSessionRequest(
            request_id=record.id,
            amount=float(record.total_price),
            callback_url=build_callback_url(self.settings, record.id),
        )
        redirect_url = self.payments.create_payment_session(payload)
        log.info("Payment session opened for rent request %s", rent_request_id)
        return redirect_url

    # --- payment callback ---------------------------------------------------

    def handle_payment_callback(self, rent_request_id: int, status: str) -> str:
        """Apply the payment service's outcome. Idempotent for repeated success callbacks."""
        event = CALLBACK_EVENTS.get((status or "").strip().lower())
        if event is None:
            raise InvalidInputError("status must be 'success' or 'cancel'")

        record = self._get(rent_request_id)
        if record.payment_status == PaymentStatus.success:
            log.info("Duplicate payment callback for rent request %s ignored", rent_request_id)
            return MSG_PAYMENT_ALREADY_PROCESSED

        try:
            with self._unit_of_work():
                self._transition(
                    record,
                    event,
                    None,
                    "Payment succeeded." if event == RentEvent.payment_success else "Payment canceled.",
                    meta={"payment_status": status},
                )
                rejected = self._reject_overlapping(record) if event == RentEvent.payment_success else []
        except InvalidStateError:
            # A concurrent delivery of the same callback may have committed first
            current = self.repo.get_by_id(rent_request_id)
            if current is not None and current.payment_status == PaymentStatus.success:
                log.info("Concurrent duplicate payment callback for rent request %s ignored", rent_request_id)
                return MSG_PAYMENT_ALREADY_PROCESSED
            log.warning(
                "Payment callback for rent request %s rejected: status=%s callback=%s",
                rent_request_id, record.status.value if record.status else None, status,
            )
            raise

        if event == RentEvent.payment_success:
            log.info(
                "Rent request %s paid; rejected %d overlapping request(s): %s",
                rent_request_id, len(rejected), rejected,
            )
            return MSG_PAYMENT_SUCCESS
        log.info("Payment canceled for rent request %s", rent_request_id)
        return MSG_PAYMENT_CANCELED

    def _reject_overlapping(self, paid: RentRequest) -> list[int]:
        """Reject every other live request on the listing whose range overlaps the paid one."""
        rejected: list[int] = []
        for live_status in LIVE_STATUSES:
            competing = self.repo.get_overlapping(paid.listing_id, live_status, paid.start_date, paid.end_date)
            for other in competing:
                if other.id == paid.id or other.id in rejected:
                    continue
                if self._reject(other, paid.id):
                    rejected.append(other.id)
        return rejected

    def _reject(self, other: RentRequest, paid_id: int) -> bool:
        """Reject `other`, following it if a concurrent writer moves it between live states."""
        for _ in range(len(LIVE_STATUSES) + 1):
            if other.status not in LIVE_STATUSES:
                return False
            try:
                self._transition(
                    other,
                    RentEvent.reconcile_reject,
                    None,
                    f"Rejected: overlapping rent request {paid_id} was paid.",
                    meta={"paid_request_id": paid_id},
                )
                return True
            except InvalidStateError:
                self.db.refresh(other)
        raise InvalidStateError(f"Could not reject overlapping rent request {other.id}")
