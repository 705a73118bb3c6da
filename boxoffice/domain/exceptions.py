

class BoxOfficeError(Exception):
    """
    Base exception for all domain-level errors
    inside the BoxOffice ticketing engine.

    Each subclass carries the HTTP status and stable
    machine code the API layer renders.
    """

    status_code: int = 500
    code: str = "BOX_OFFICE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(BoxOfficeError):
    """Raised for malformed or missing input."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(BoxOfficeError):
    """Raised when a referenced entity is absent or not visible to the caller."""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(BoxOfficeError):
    """Raised on state or uniqueness violations."""

    status_code = 409
    code = "CONFLICT"


class TicketUnavailableError(ConflictError):
    """Raised when a locked ticket is no longer Available."""

    code = "TICKET_UNAVAILABLE"

    def __init__(self, ticket_id: str, status: str):
        self.ticket_id = ticket_id
        self.status = status
        super().__init__(f"Ticket {ticket_id} unavailable: ({status})")


class SeatAlreadyListedError(ConflictError):
    """Raised when a seat already has a ticket for the event."""

    code = "SEAT_ALREADY_LISTED"

    def __init__(self, event_id: str, seat_label: str):
        self.event_id = event_id
        self.seat_label = seat_label
        super().__init__(f"Seat {seat_label} is already listed for this event")


class InvalidStateTransitionError(ConflictError):
    """
    Raised when an illegal ticket state transition is attempted.
    """

    code = "INVALID_STATE_TRANSITION"

    def __init__(self, from_state: str, to_state: str):
        self.from_state = from_state
        self.to_state = to_state

        message = (
            f"Illegal state transition attempted: "
            f"{from_state} -> {to_state}"
        )
        super().__init__(message)


class AuthenticationError(BoxOfficeError):
    status_code = 401
    code = "UNAUTHENTICATED"


class ForbiddenError(BoxOfficeError):
    status_code = 403
    code = "FORBIDDEN"


class StorageError(BoxOfficeError):
    """Raised when the database fails underneath an operation."""

    code = "STORAGE_ERROR"


class StorageUnavailableError(StorageError):
    """Raised on connection loss, pool exhaustion or lock timeout. Safe to retry."""

    status_code = 503
    code = "STORAGE_UNAVAILABLE"
