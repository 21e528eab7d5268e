"""
Typed failures of the rent request service.

Services raise these; app.main renders them as {"detail": message} with the
status_code carried by each class, so routers never translate errors by hand.
"""


class RentRequestError(Exception):
    """Base class for every failure surfaced to the caller."""

    status_code = 500
    default_message = "Error: rent request operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(RentRequestError):
    """Malformed dates, unknown status values, bad listing id."""

    status_code = 400
    default_message = "Error: invalid input"


class ForbiddenError(RentRequestError):
    """Caller is not the party required for the operation."""

    status_code = 403
    default_message = "Error: not allowed for this rent request"


class NotFoundError(RentRequestError):
    status_code = 404
    default_message = "Error: rent request not found"


class ConflictError(RentRequestError):
    """A paid request already covers part of the proposed period."""

    status_code = 409
    default_message = "Error: there is already a paid request in this period"


class InvalidStateError(RentRequestError):
    """Transition attempted from a state that does not allow it."""

    status_code = 409
    default_message = "Error: operation not allowed in the current state"


class UpstreamError(RentRequestError):
    """Listing or payment service unavailable or answered unexpectedly."""

    status_code = 502
    default_message = "Error: upstream service failed"


class PersistenceError(RentRequestError):
    status_code = 500
    default_message = "Error: failed to store rent request"
