"""Persistence for rent requests. No domain rules here; commit/rollback stay with the caller."""
from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import PersistenceError
from app.models.rent_request import RentRequest, RentRequestStatus


@contextmanager
def _store_errors(action: str):
    """Re-raise store failures as PersistenceError."""
    try:
        yield
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to {action}: {e}") from e


class RentRequestRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, record: RentRequest) -> int:
        with _store_errors("create rent request"):
            self.db.add(record)
            self.db.flush()  # assigns record.id
        return record.id

    def replace(self, record: RentRequest) -> RentRequest:
        """Full overwrite of the stored row with the given record's fields."""
        with _store_errors(f"update rent request {record.id}"):
            merged = self.db.merge(record)
            self.db.flush()
        return merged

    def transition(self, rent_request_id: int, expected_status: RentRequestStatus, **values: Any) -> bool:
        """Conditional update: applies `values` only while the row still has `expected_status`.

        Returns False when another writer changed the status first.
        """
        with _store_errors(f"update rent request {rent_request_id}"):
            updated = (
                self.db.query(RentRequest)
                .filter(RentRequest.id == rent_request_id, RentRequest.status == expected_status)
                .update(values, synchronize_session="fetch")
            )
        return updated == 1

    def get_by_id(self, rent_request_id: int) -> RentRequest | None:
        with _store_errors(f"load rent request {rent_request_id}"):
            return self.db.query(RentRequest).filter(RentRequest.id == rent_request_id).first()

    def get_overlapping(
        self,
        listing_id: int,
        status: RentRequestStatus,
        range_start: date,
        range_end: date,
    ) -> list[RentRequest]:
        """Requests on the listing with `status` whose inclusive range intersects [range_start, range_end]."""
        with _store_errors(f"load overlapping rent requests for listing {listing_id}"):
            return (
                self.db.query(RentRequest)
                .filter(
                    RentRequest.listing_id == listing_id,
                    RentRequest.status == status,
                    RentRequest.start_date <= range_end,
                    RentRequest.end_date >= range_start,
                )
                .order_by(RentRequest.id)
                .all()
            )

    def list_by_owner(
        self,
        owner_id: int,
        status: RentRequestStatus | None = None,
        min_date: date | None = None,
        max_date: date | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> list[RentRequest]:
        return self._list(RentRequest.owner_id == owner_id, status, min_date, max_date, offset, limit)

    def list_by_renter(
        self,
        renter_id: int,
        status: RentRequestStatus | None = None,
        min_date: date | None = None,
        max_date: date | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> list[RentRequest]:
        return self._list(RentRequest.renter_id == renter_id, status, min_date, max_date, offset, limit)

    def _list(self, party_clause, status, min_date, max_date, offset, limit) -> list[RentRequest]:
        with _store_errors("list rent requests"):
            query = self.db.query(RentRequest).filter(party_clause)
            if status is not None:
                query = query.filter(RentRequest.status == status)
            # created_at filter covers both whole days
            if min_date is not None:
                query = query.filter(RentRequest.created_at >= datetime.combine(min_date, time.min))
            if max_date is not None:
                query = query.filter(
                    RentRequest.created_at < datetime.combine(max_date + timedelta(days=1), time.min)
                )
            return query.order_by(RentRequest.id).offset(offset).limit(limit).all()
