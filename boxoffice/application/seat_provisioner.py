import logging
import string

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from boxoffice.domain.exceptions import NotFoundError
from boxoffice.infrastructure.repositories.event_repository import EventRepository
from boxoffice.infrastructure.repositories.seat_repository import SeatRepository

logger = logging.getLogger(__name__)

AUTO_SECTION_NAME = "Auto Generated"
AUTO_ROW_LABELS = list(string.ascii_uppercase)
AUTO_SEATS_PER_ROW = 10
AUTO_SECTION_CAPACITY = len(AUTO_ROW_LABELS) * AUTO_SEATS_PER_ROW


class SeatProvisioner:
    """Lazily gives a venue a default seat grid the first time tickets need one."""

    def __init__(self, db: Session):
        self.db = db
        self.event_repository = EventRepository(db)
        self.seat_repository = SeatRepository(db)

    def ensure_seats(self, venue_id: str) -> int:
        if self.event_repository.get_venue(venue_id) is None:
            raise NotFoundError("Venue not found")

        existing = self.seat_repository.count_for_venue(venue_id)
        if existing:
            return existing

        try:
            with self.db.begin_nested():
                section = self.seat_repository.get_section(venue_id, AUTO_SECTION_NAME)
                if section is None:
                    section = self.seat_repository.create_section(
                        venue_id=venue_id,
                        name=AUTO_SECTION_NAME,
                        capacity=AUTO_SECTION_CAPACITY,
                    )
                created = self.seat_repository.bulk_create_seats(
                    section_id=section.id,
                    row_labels=AUTO_ROW_LABELS,
                    seats_per_row=AUTO_SEATS_PER_ROW,
                )
            logger.info("Provisioned %s seats for venue %s", created, venue_id)
        except IntegrityError:
            # A concurrent caller won the unique section/seat insert; use its rows.
            logger.info("Seat grid for venue %s was provisioned concurrently", venue_id)

        return self.seat_repository.count_for_venue(venue_id)
