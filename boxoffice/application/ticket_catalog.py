import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from boxoffice.application.seat_provisioner import SeatProvisioner
from boxoffice.domain.exceptions import (
    ConflictError,
    NotFoundError,
    SeatAlreadyListedError,
    ValidationError,
)
from boxoffice.domain.state_machine import TicketStateMachine, TicketStatus
from boxoffice.domain.validators import clamp_pagination, parse_seat_label, validate_price
from boxoffice.infrastructure.db.models import Event, Seat, Ticket
from boxoffice.infrastructure.repositories.event_repository import EventRepository
from boxoffice.infrastructure.repositories.seat_repository import SeatRepository
from boxoffice.infrastructure.repositories.ticket_repository import TicketRepository

logger = logging.getLogger(__name__)


class TicketCatalog:
    """Application service for listing, pricing and withdrawing tickets."""

    def __init__(self, db: Session):
        self.db = db
        self.event_repository = EventRepository(db)
        self.seat_repository = SeatRepository(db)
        self.ticket_repository = TicketRepository(db)
        self.provisioner = SeatProvisioner(db)

    def list_tickets(
        self,
        event_id: str | None = None,
        status: TicketStatus | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Ticket]:
        safe_limit, safe_offset = clamp_pagination(limit, offset)
        return self.ticket_repository.list_tickets(
            event_id=event_id,
            status=status,
            limit=safe_limit,
            offset=safe_offset,
        )

    def create_ticket(
        self,
        organizer_id: str,
        event_id: str,
        seat_label: Any,
        price: Any,
    ) -> Ticket:
        amount = validate_price(price)
        row_label, seat_number = parse_seat_label(seat_label)

        event = self._owned_event(organizer_id, event_id)
        self.provisioner.ensure_seats(event.venue_id)
        seat = self._resolve_seat(event.venue_id, row_label, seat_number, seat_label)

        try:
            with self.db.begin_nested():
                ticket = self.ticket_repository.create_ticket(
                    event_id=event.id,
                    seat_id=seat.id,
                    price=amount,
                )
        except IntegrityError as exc:
            raise SeatAlreadyListedError(event.id, seat.label) from exc

        logger.info(
            "Listed ticket %s for event %s seat %s at %s",
            ticket.id,
            event.id,
            seat.label,
            amount,
        )
        return ticket

    def update_ticket(
        self,
        organizer_id: str,
        ticket_id: str,
        price: Any = None,
        status: TicketStatus | None = None,
    ) -> Ticket:
        if price is None and status is None:
            raise ValidationError("Provide at least one of price or status")

        new_price = validate_price(price) if price is not None else None
        ticket = self._owned_ticket(organizer_id, ticket_id)

        if ticket.status == TicketStatus.SOLD:
            raise ConflictError(f"Ticket {ticket.id} is already sold")

        if status is not None and status != ticket.status:
            TicketStateMachine.validate_transition(ticket.status, status)
            if status == TicketStatus.SOLD:
                raise ConflictError("Tickets can only be sold through an order")
            ticket.status = status

        if new_price is not None:
            ticket.price = new_price

        self.db.flush()
        return ticket

    def delete_ticket(self, organizer_id: str, ticket_id: str) -> None:
        ticket = self._owned_ticket(organizer_id, ticket_id)
        if ticket.status == TicketStatus.SOLD:
            raise ConflictError(f"Ticket {ticket.id} is sold and cannot be deleted")

        self.ticket_repository.delete_ticket(ticket)
        self.db.flush()
        logger.info("Deleted ticket %s", ticket_id)

    def list_available_seats(self, organizer_id: str, event_id: str) -> list[Seat]:
        event = self._owned_event(organizer_id, event_id)
        self.provisioner.ensure_seats(event.venue_id)
        return self.seat_repository.list_unticketed(event.venue_id, event.id)

    def _owned_event(self, organizer_id: str, event_id: str) -> Event:
        # Foreign events look missing rather than forbidden.
        event = self.event_repository.get_owned(event_id, organizer_id)
        if event is None:
            raise NotFoundError("Event not found")
        return event

    def _owned_ticket(self, organizer_id: str, ticket_id: str) -> Ticket:
        ticket = self.ticket_repository.get_by_id(ticket_id, for_update=True)
        if ticket is None or ticket.event.organizer_id != organizer_id:
            raise NotFoundError("Ticket not found")
        return ticket

    def _resolve_seat(
        self,
        venue_id: str,
        row_label: str | None,
        seat_number: int,
        seat_label: Any,
    ) -> Seat:
        seats = self.seat_repository.find_by_label(venue_id, row_label, seat_number)
        if not seats:
            raise NotFoundError(f"Seat {seat_label} not found at this venue")
        if len(seats) > 1:
            raise ValidationError(
                f"Seat {seat_label} matches {len(seats)} seats; use '<row>-<number>'"
            )
        return seats[0]
