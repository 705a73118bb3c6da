# boxoffice/infrastructure/repositories/event_repository.py

from sqlalchemy.orm import Session
from sqlalchemy import or_, select

from boxoffice.infrastructure.db.models import Event, Venue
from boxoffice.domain.state_machine import EventStatus


class EventRepository:

    def __init__(self, db: Session):
        self.db = db

    # -----------------------------
    # Venues
    # -----------------------------
    def get_venue(self, venue_id: str) -> Venue | None:
        stmt = select(Venue).where(Venue.id == venue_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_venues(self) -> list[Venue]:
        stmt = select(Venue).order_by(Venue.city, Venue.name, Venue.id)
        return list(self.db.execute(stmt).scalars().all())

    def create_venue(self, name: str, city: str, address: str) -> Venue:
        venue = Venue(name=name, city=city, address=address)
        self.db.add(venue)
        self.db.flush()
        return venue

    # -----------------------------
    # Events
    # -----------------------------
    def get_by_id(self, event_id: str) -> Event | None:
        stmt = select(Event).where(Event.id == event_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_owned(self, event_id: str, organizer_id: str) -> Event | None:
        """Event by id, visible only to the organizer who owns it."""
        stmt = (
            select(Event)
            .where(Event.id == event_id)
            .where(Event.organizer_id == organizer_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_for_organizer(self, organizer_id: str) -> list[Event]:
        stmt = (
            select(Event)
            .where(Event.organizer_id == organizer_id)
            .order_by(Event.start_time, Event.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def search(
        self,
        query: str | None,
        city: str | None,
        status: EventStatus | None,
        limit: int,
        offset: int,
    ) -> list[Event]:
        stmt = select(Event).join(Venue, Event.venue_id == Venue.id)
        if query:
            pattern = f"%{query}%"
            stmt = stmt.where(
                or_(
                    Event.title.ilike(pattern),
                    Event.description.ilike(pattern),
                )
            )
        if city:
            stmt = stmt.where(Venue.city == city)
        if status is not None:
            stmt = stmt.where(Event.status == status)

        stmt = stmt.order_by(Event.start_time, Event.id).limit(limit).offset(offset)
        return list(self.db.execute(stmt).scalars().all())

    def add(self, event: Event) -> Event:
        self.db.add(event)
        self.db.flush()
        return event

    def delete(self, event: Event) -> None:
        self.db.delete(event)
