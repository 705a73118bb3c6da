# boxoffice/infrastructure/repositories/seat_repository.py

from uuid import uuid4

from sqlalchemy.orm import Session
from sqlalchemy import func, insert, select

from boxoffice.infrastructure.db.models import Seat, Section, Ticket


class SeatRepository:

    def __init__(self, db: Session):
        self.db = db

    def count_for_venue(self, venue_id: str) -> int:
        stmt = (
            select(func.count(Seat.id))
            .join(Section, Seat.section_id == Section.id)
            .where(Section.venue_id == venue_id)
        )
        return self.db.execute(stmt).scalar_one()

    def get_section(self, venue_id: str, name: str) -> Section | None:
        stmt = (
            select(Section)
            .where(Section.venue_id == venue_id)
            .where(Section.name == name)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create_section(
        self,
        venue_id: str,
        name: str,
        capacity: int,
    ) -> Section:
        section = Section(
            venue_id=venue_id,
            name=name,
            capacity=capacity,
        )
        self.db.add(section)
        self.db.flush()
        return section

    def bulk_create_seats(
        self,
        section_id: str,
        row_labels: list[str],
        seats_per_row: int,
    ) -> int:
        rows = [
            {
                "id": str(uuid4()),
                "section_id": section_id,
                "row_label": row_label,
                "seat_number": number,
            }
            for row_label in row_labels
            for number in range(1, seats_per_row + 1)
        ]
        self.db.execute(insert(Seat), rows)
        return len(rows)

    def find_by_label(
        self,
        venue_id: str,
        row_label: str | None,
        seat_number: int,
    ) -> list[Seat]:
        """
        Seats in the venue matching the label. A bare number
        (no row) can match one seat per row.
        """
        stmt = (
            select(Seat)
            .join(Section, Seat.section_id == Section.id)
            .where(Section.venue_id == venue_id)
            .where(Seat.seat_number == seat_number)
            .order_by(Seat.row_label, Seat.id)
        )
        if row_label is not None:
            stmt = stmt.where(Seat.row_label == row_label)

        return list(self.db.execute(stmt).scalars().all())

    def list_unticketed(self, venue_id: str, event_id: str) -> list[Seat]:
        listed = select(Ticket.seat_id).where(Ticket.event_id == event_id)
        stmt = (
            select(Seat)
            .join(Section, Seat.section_id == Section.id)
            .where(Section.venue_id == venue_id)
            .where(Seat.id.not_in(listed))
            .order_by(Section.name, Seat.row_label, Seat.seat_number)
        )
        return list(self.db.execute(stmt).scalars().all())
