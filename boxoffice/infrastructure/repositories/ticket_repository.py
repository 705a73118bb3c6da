# boxoffice/infrastructure/repositories/ticket_repository.py

from decimal import Decimal

from sqlalchemy.orm import Session
from sqlalchemy import func, select

from boxoffice.infrastructure.db.models import Ticket
from boxoffice.domain.state_machine import TicketStatus


class TicketRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, ticket_id: str, for_update: bool = False) -> Ticket | None:
        stmt = select(Ticket).where(Ticket.id == ticket_id)
        if for_update:
            # Held until commit; a purchase cannot sell the row between check and write.
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_tickets(
        self,
        event_id: str | None,
        status: TicketStatus | None,
        limit: int,
        offset: int,
    ) -> list[Ticket]:
        stmt = select(Ticket)
        if event_id is not None:
            stmt = stmt.where(Ticket.event_id == event_id)
        if status is not None:
            stmt = stmt.where(Ticket.status == status)

        stmt = stmt.order_by(Ticket.id).limit(limit).offset(offset)
        return list(self.db.execute(stmt).scalars().all())

    def count_for_event(self, event_id: str) -> int:
        stmt = select(func.count(Ticket.id)).where(Ticket.event_id == event_id)
        return self.db.execute(stmt).scalar_one()

    def lock_tickets(self, ticket_ids: list[str]) -> list[Ticket]:
        """
        SELECT ... FOR UPDATE on exactly the requested ids.
        Rows are locked in id order so overlapping purchases
        acquire locks in the same sequence.
        """

        stmt = (
            select(Ticket)
            .where(Ticket.id.in_(ticket_ids))
            .order_by(Ticket.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars().all())

    def create_ticket(
        self,
        event_id: str,
        seat_id: str,
        price: Decimal,
    ) -> Ticket:
        ticket = Ticket(
            event_id=event_id,
            seat_id=seat_id,
            price=price,
            status=TicketStatus.AVAILABLE,
        )
        self.db.add(ticket)
        self.db.flush()
        return ticket

    def mark_sold(self, tickets: list[Ticket], order_id: str) -> None:
        for ticket in tickets:
            ticket.status = TicketStatus.SOLD
            ticket.order_id = order_id

    def delete_ticket(self, ticket: Ticket) -> None:
        self.db.delete(ticket)
