import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from boxoffice.domain.exceptions import ConflictError, NotFoundError, ValidationError
from boxoffice.domain.state_machine import EventStatus
from boxoffice.domain.validators import (
    clamp_pagination,
    validate_price,
    validate_required_string,
)
from boxoffice.infrastructure.db.models import Event, Venue
from boxoffice.infrastructure.repositories.event_repository import EventRepository
from boxoffice.infrastructure.repositories.ticket_repository import TicketRepository

logger = logging.getLogger(__name__)

# Fields an organizer may change on an event. Anything else in a
# request is rejected instead of being written through.
UPDATABLE_EVENT_FIELDS = (
    "title",
    "description",
    "start_time",
    "end_time",
    "standard_price",
    "status",
    "venue_id",
)


class EventService:

    def __init__(self, db: Session):
        self.db = db
        self.event_repository = EventRepository(db)
        self.ticket_repository = TicketRepository(db)

    # -----------------------------
    # Venues
    # -----------------------------
    def create_venue(self, name: Any, city: Any, address: Any) -> Venue:
        return self.event_repository.create_venue(
            name=validate_required_string(name, "Venue name", 128),
            city=validate_required_string(city, "City", 64),
            address=validate_required_string(address, "Address", 255),
        )

    def list_venues(self) -> list[Venue]:
        return self.event_repository.list_venues()

    # -----------------------------
    # Public catalog
    # -----------------------------
    def search_events(
        self,
        query: str | None = None,
        city: str | None = None,
        status: EventStatus | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Event]:
        safe_limit, safe_offset = clamp_pagination(limit, offset)
        return self.event_repository.search(
            query=query.strip() if query else None,
            city=city.strip() if city else None,
            status=status,
            limit=safe_limit,
            offset=safe_offset,
        )

    def get_event(self, event_id: str) -> Event:
        event = self.event_repository.get_by_id(event_id)
        if event is None:
            raise NotFoundError("Event not found")
        return event

    # -----------------------------
    # Organizer operations
    # -----------------------------
    def list_organizer_events(self, organizer_id: str) -> list[Event]:
        return self.event_repository.list_for_organizer(organizer_id)

    def get_organizer_event(self, organizer_id: str, event_id: str) -> Event:
        event = self.event_repository.get_owned(event_id, organizer_id)
        if event is None:
            raise NotFoundError("Event information not found.")
        return event

    def create_event(
        self,
        organizer_id: str,
        venue_id: str,
        title: Any,
        start_time: datetime,
        end_time: datetime,
        standard_price: Any,
        description: str | None = None,
        status: EventStatus = EventStatus.SCHEDULED,
    ) -> Event:
        self._require_venue(venue_id)
        _check_time_window(start_time, end_time)

        event = Event(
            organizer_id=organizer_id,
            venue_id=venue_id,
            title=validate_required_string(title, "Title", 128),
            description=(description or "").strip(),
            start_time=start_time,
            end_time=end_time,
            standard_price=validate_price(standard_price, "Standard price"),
            status=status,
        )
        self.event_repository.add(event)
        logger.info("Organizer %s created event %s", organizer_id, event.id)
        return event

    def update_event(
        self,
        organizer_id: str,
        event_id: str,
        changes: dict[str, Any],
    ) -> Event:
        unknown = sorted(set(changes) - set(UPDATABLE_EVENT_FIELDS))
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")
        if not changes:
            raise ValidationError("Provide at least one field to update")

        event = self.get_organizer_event(organizer_id, event_id)
        values: dict[str, Any] = {}

        if "title" in changes:
            values["title"] = validate_required_string(changes["title"], "Title", 128)
        if "description" in changes:
            values["description"] = (changes["description"] or "").strip()
        if "standard_price" in changes:
            values["standard_price"] = validate_price(
                changes["standard_price"], "Standard price"
            )
        if "status" in changes:
            if not isinstance(changes["status"], EventStatus):
                raise ValidationError("Invalid event status")
            values["status"] = changes["status"]
        if "venue_id" in changes:
            self._require_venue(changes["venue_id"])
            if self.ticket_repository.count_for_event(event.id):
                raise ConflictError("Venue cannot change once tickets are listed")
            values["venue_id"] = changes["venue_id"]
        for field in ("start_time", "end_time"):
            if field in changes:
                if not isinstance(changes[field], datetime):
                    raise ValidationError(f"{field} must be a datetime")
                values[field] = changes[field]

        _check_time_window(
            values.get("start_time", event.start_time),
            values.get("end_time", event.end_time),
        )

        for field, value in values.items():
            setattr(event, field, value)
        self.db.flush()
        return event

    def delete_event(self, organizer_id: str, event_id: str) -> None:
        event = self.get_organizer_event(organizer_id, event_id)
        if self.ticket_repository.count_for_event(event.id):
            raise ConflictError("Event has listed tickets and cannot be deleted")

        self.event_repository.delete(event)
        self.db.flush()
        logger.info("Organizer %s deleted event %s", organizer_id, event_id)

    def _require_venue(self, venue_id: Any) -> Venue:
        venue = self.event_repository.get_venue(venue_id) if isinstance(venue_id, str) else None
        if venue is None:
            raise NotFoundError("Venue not found")
        return venue


def _check_time_window(start_time: datetime, end_time: datetime) -> None:
    if _as_utc_naive(end_time) < _as_utc_naive(start_time):
        raise ValidationError("end_time must not be before start_time")


def _as_utc_naive(value: datetime) -> datetime:
    # SQLite hands back naive datetimes.
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
