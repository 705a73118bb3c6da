import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

# The engine is built from the environment at import time, so point it at a
# throwaway SQLite file before anything from boxoffice is imported.
_DB_DIR = Path(tempfile.mkdtemp(prefix="boxoffice-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'boxoffice.db'}"
os.environ["LOCK_TIMEOUT_MS"] = "10000"

import pytest
from fastapi.testclient import TestClient

from boxoffice.application.event_service import EventService
from boxoffice.application.ticket_catalog import TicketCatalog
from boxoffice.infrastructure.db.models import Base
from boxoffice.infrastructure.db.session import SessionLocal, engine, get_db_session
from boxoffice.main import app

from tests.constants import CUSTOMER_ID, ORGANIZER_ID


@pytest.fixture(autouse=True)
def reset_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def organizer_headers():
    return {"X-User-Id": ORGANIZER_ID, "X-User-Role": "Organizer"}


@pytest.fixture
def customer_headers():
    return {"X-User-Id": CUSTOMER_ID, "X-User-Role": "Customer"}


@pytest.fixture
def make_event():
    """Create a venue and an event owned by ``organizer_id``; returns their ids."""

    def _make(
        organizer_id: str = ORGANIZER_ID,
        title: str = "Night Market Jazz",
        city: str = "Portland",
    ) -> SimpleNamespace:
        start = datetime(2030, 6, 1, 19, 30, tzinfo=timezone.utc)
        with get_db_session() as session:
            service = EventService(session)
            venue = service.create_venue(
                name="Riverside Hall",
                city=city,
                address="100 Water Ave",
            )
            event = service.create_event(
                organizer_id=organizer_id,
                venue_id=venue.id,
                title=title,
                description="Late set with the house trio.",
                start_time=start,
                end_time=start + timedelta(hours=3),
                standard_price="25.00",
            )
            return SimpleNamespace(venue_id=venue.id, event_id=event.id)

    return _make


@pytest.fixture
def make_ticket():
    def _make(
        event_id: str,
        seat_label: str = "A-1",
        price: str = "25.00",
        organizer_id: str = ORGANIZER_ID,
    ) -> str:
        with get_db_session() as session:
            ticket = TicketCatalog(session).create_ticket(
                organizer_id=organizer_id,
                event_id=event_id,
                seat_label=seat_label,
                price=price,
            )
            return ticket.id

    return _make
