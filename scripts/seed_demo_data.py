from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from boxoffice.application.event_service import EventService
from boxoffice.application.ticket_catalog import TicketCatalog
from boxoffice.infrastructure.db.models import Base, Event, Venue
from boxoffice.infrastructure.db.session import SessionLocal, engine

DEMO_ORGANIZER_ID = "organizer-demo"


def _dt(days_from_now: int, hour: int, minute: int) -> datetime:
    now = datetime.now(timezone.utc)
    target = now + timedelta(days=days_from_now)
    return target.replace(hour=hour, minute=minute, second=0, microsecond=0)


def seed_venue(db) -> Venue:
    existing = db.execute(
        select(Venue).where(Venue.name == "Riverside Hall")
    ).scalar_one_or_none()
    if existing:
        return existing
    return EventService(db).create_venue(
        name="Riverside Hall",
        city="Portland",
        address="100 Water Ave",
    )


def seed_event(db, venue: Venue) -> Event:
    existing = db.execute(
        select(Event)
        .where(Event.organizer_id == DEMO_ORGANIZER_ID)
        .where(Event.title == "Night Market Jazz")
    ).scalar_one_or_none()
    if existing:
        return existing
    return EventService(db).create_event(
        organizer_id=DEMO_ORGANIZER_ID,
        venue_id=venue.id,
        title="Night Market Jazz",
        description="Late set with the house trio.",
        start_time=_dt(days_from_now=10, hour=19, minute=30),
        end_time=_dt(days_from_now=10, hour=22, minute=0),
        standard_price="25.00",
    )


def seed_tickets(db, event: Event) -> int:
    catalog = TicketCatalog(db)
    if catalog.list_tickets(event_id=event.id, limit=1):
        return 0

    created = 0
    for row_label in ("A", "B"):
        for number in range(1, 6):
            price = "40.00" if row_label == "A" else "25.00"
            catalog.create_ticket(
                organizer_id=DEMO_ORGANIZER_ID,
                event_id=event.id,
                seat_label=f"{row_label}-{number}",
                price=price,
            )
            created += 1
    return created


def main() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        venue = seed_venue(db)
        event = seed_event(db, venue)
        created = seed_tickets(db, event)
        db.commit()
        print(f"Seed complete: event {event.id} at {venue.name}, {created} tickets listed.")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
