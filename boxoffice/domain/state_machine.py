# boxoffice/domain/state_machine.py

from enum import Enum
from typing import Dict, Set

from boxoffice.domain.exceptions import InvalidStateTransitionError


class TicketStatus(str, Enum):
    AVAILABLE = "Available"
    SOLD = "Sold"


class OrderStatus(str, Enum):
    PAID = "Paid"


class PaymentStatus(str, Enum):
    COMPLETED = "Completed"


class EventStatus(str, Enum):
    SCHEDULED = "Scheduled"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"


class TicketStateMachine:
    """
    Central lifecycle controller for ticket transitions.
    A ticket is listed Available and becomes Sold once,
    inside a committed order. Refunds are not modelled,
    so Sold is terminal.
    """

    _ALLOWED_TRANSITIONS: Dict[TicketStatus, Set[TicketStatus]] = {
        TicketStatus.AVAILABLE: {
            TicketStatus.SOLD,
        },
        TicketStatus.SOLD: set(),
    }

    @classmethod
    def can_transition(
        cls,
        from_status: TicketStatus,
        to_status: TicketStatus,
    ) -> bool:
        """
        Returns True if transition is allowed.
        """
        cls._ensure_valid_status(from_status)
        cls._ensure_valid_status(to_status)

        return to_status in cls._ALLOWED_TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(
        cls,
        from_status: TicketStatus,
        to_status: TicketStatus,
    ) -> None:
        """
        Raises InvalidStateTransitionError if transition is illegal.
        """
        if not cls.can_transition(from_status, to_status):
            raise InvalidStateTransitionError(
                from_state=from_status.value,
                to_state=to_status.value,
            )

    @classmethod
    def is_terminal(cls, status: TicketStatus) -> bool:
        cls._ensure_valid_status(status)
        return len(cls._ALLOWED_TRANSITIONS.get(status, set())) == 0

    @staticmethod
    def _ensure_valid_status(status: TicketStatus) -> None:
        if not isinstance(status, TicketStatus):
            raise TypeError(
                f"Expected TicketStatus, got {type(status)}"
            )
