"""Rent request state machine.

Pure functions over a small snapshot of a request, so the transition table can be
tested without a database:

    awaiting_confirmation --confirm (owner)--------------> confirmed
    confirmed --initiate_payment (renter)----------------> confirmed
    confirmed --payment_success (callback)---------------> paid
    confirmed --payment_cancel (callback)----------------> confirmed, payment canceled
    awaiting_confirmation|confirmed --cancel (renter)----> canceled
    awaiting_confirmation|confirmed --reconcile_reject---> rejected

Role checks run before state checks.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, replace

from app.exceptions import ForbiddenError, InvalidStateError
from app.models.rent_request import RentRequest, RentRequestStatus, PaymentStatus, LIVE_STATUSES


class RentEvent(str, enum.Enum):
    confirm = "confirm"
    initiate_payment = "initiate_payment"
    payment_success = "payment_success"
    payment_cancel = "payment_cancel"
    cancel = "cancel"
    reconcile_reject = "reconcile_reject"


class Actor(str, enum.Enum):
    owner = "owner"
    renter = "renter"
    system = "system"  # payment callback and reconciliation


@dataclass(frozen=True)
class RentState:
    status: RentRequestStatus
    payment_status: PaymentStatus
    renter_id: int
    owner_id: int

    @classmethod
    def of(cls, record: RentRequest) -> "RentState":
        return cls(
            status=record.status,
            payment_status=record.payment_status,
            renter_id=record.renter_id,
            owner_id=record.owner_id,
        )


@dataclass(frozen=True)
class _Rule:
    actor: Actor
    allowed_from: tuple[RentRequestStatus, ...]
    to_status: RentRequestStatus | None  # None keeps the current status
    payment_status: PaymentStatus | None = None


TRANSITIONS: dict[RentEvent, _Rule] = {
    RentEvent.confirm: _Rule(
        Actor.owner, (RentRequestStatus.awaiting_confirmation,), RentRequestStatus.confirmed
    ),
    RentEvent.initiate_payment: _Rule(Actor.renter, (RentRequestStatus.confirmed,), None),
    RentEvent.payment_success: _Rule(
        Actor.system, (RentRequestStatus.confirmed,), RentRequestStatus.paid, PaymentStatus.success
    ),
    RentEvent.payment_cancel: _Rule(
        Actor.system, (RentRequestStatus.confirmed,), None, PaymentStatus.canceled
    ),
    RentEvent.cancel: _Rule(Actor.renter, LIVE_STATUSES, RentRequestStatus.canceled),
    RentEvent.reconcile_reject: _Rule(Actor.system, LIVE_STATUSES, RentRequestStatus.rejected),
}

_FORBIDDEN_MESSAGES = {
    Actor.owner: "Only the owner of the listing can do this",
    Actor.renter: "Only the renter can do this",
}


def _check_actor(state: RentState, actor: Actor, actor_id: int | None) -> None:
    if actor == Actor.owner and actor_id != state.owner_id:
        raise ForbiddenError(_FORBIDDEN_MESSAGES[actor])
    if actor == Actor.renter and actor_id != state.renter_id:
        raise ForbiddenError(_FORBIDDEN_MESSAGES[actor])


def apply_event(state: RentState, event: RentEvent, actor_id: int | None = None) -> RentState:
    """Return the state after `event`, or raise ForbiddenError / InvalidStateError."""
    rule = TRANSITIONS[event]
    _check_actor(state, rule.actor, actor_id)
    if state.status not in rule.allowed_from:
        raise InvalidStateError(
            f"Cannot {event.value.replace('_', ' ')} a rent request in status '{state.status.value}'"
        )
    return replace(
        state,
        status=rule.to_status or state.status,
        payment_status=rule.payment_status or state.payment_status,
    )


def can_view(state: RentState, user_id: int) -> bool:
    """Renter or owner may read a request."""
    return user_id in (state.renter_id, state.owner_id)
