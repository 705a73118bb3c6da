from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from boxoffice.application.event_service import EventService
from boxoffice.domain.state_machine import TicketStatus
from boxoffice.infrastructure.db.models import Order, Ticket
from boxoffice.infrastructure.repositories.order_repository import OrderRepository
from boxoffice.infrastructure.repositories.ticket_repository import TicketRepository

from tests.constants import OTHER_CUSTOMER_ID


def test_purchase_flow(client, organizer_headers, customer_headers, make_event):
    listing = make_event()

    create_response = client.post(
        "/tickets",
        json={"eventId": listing.event_id, "seatLabel": "A-1", "price": "25.00"},
        headers=organizer_headers,
    )
    assert create_response.status_code == 201
    ticket_id = create_response.json()["ticketId"]

    list_response = client.get("/tickets", params={"eventId": listing.event_id})
    assert list_response.status_code == 200
    assert [ticket["id"] for ticket in list_response.json()] == [ticket_id]
    assert list_response.json()[0]["status"] == "Available"

    order_response = client.post(
        "/orders",
        json={"tickets": [ticket_id]},
        headers=customer_headers,
    )
    assert order_response.status_code == 201
    assert order_response.json()["amount"] == 25.0
    order_id = order_response.json()["orderId"]

    detail = client.get(f"/orders/{order_id}", headers=customer_headers)
    assert detail.status_code == 200
    body = detail.json()
    assert body["order"]["status"] == "Paid"
    assert body["tickets"][0]["rowLabel"] == "A"
    assert body["tickets"][0]["status"] == "Sold"
    assert body["payment"]["method"] == "Credit"
    assert body["payment"]["status"] == "Completed"

    orders = client.get("/orders", headers=customer_headers)
    assert [order["id"] for order in orders.json()] == [order_id]


def test_second_purchase_gets_conflict(client, customer_headers, make_event, make_ticket):
    listing = make_event()
    ticket_id = make_ticket(listing.event_id)

    first = client.post("/orders", json={"tickets": [ticket_id]}, headers=customer_headers)
    assert first.status_code == 201

    second = client.post(
        "/orders",
        json={"tickets": [ticket_id]},
        headers={"X-User-Id": OTHER_CUSTOMER_ID, "X-User-Role": "Customer"},
    )
    assert second.status_code == 409
    assert second.json()["code"] == "TICKET_UNAVAILABLE"
    assert "Sold" in second.json()["detail"]


def test_empty_order_is_rejected(client, db, customer_headers):
    response = client.post("/orders", json={"tickets": []}, headers=customer_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "No tickets provided."
    assert db.execute(select(func.count(Order.id))).scalar_one() == 0


def test_unknown_ticket_is_not_found(client, customer_headers):
    response = client.post(
        "/orders",
        json={"tickets": ["missing"]},
        headers=customer_headers,
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Some tickets not found"


def test_malformed_order_body(client, customer_headers):
    response = client.post("/orders", json={"tickets": "abc"}, headers=customer_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_orders_require_identity(client):
    response = client.post("/orders", json={"tickets": ["x"]})

    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHENTICATED"


def test_unknown_role_is_unauthenticated(client):
    response = client.get("/orders", headers={"X-User-Id": "u", "X-User-Role": "Admin"})

    assert response.status_code == 401


def test_customer_cannot_list_tickets_for_sale(client, customer_headers, make_event):
    listing = make_event()

    response = client.post(
        "/tickets",
        json={"eventId": listing.event_id, "seatLabel": "A-1", "price": 10},
        headers=customer_headers,
    )

    assert response.status_code == 403


def test_duplicate_seat_listing(client, organizer_headers, make_event, make_ticket):
    listing = make_event()
    make_ticket(listing.event_id, "B-2")

    response = client.post(
        "/tickets",
        json={"eventId": listing.event_id, "seatLabel": "B-2", "price": 10},
        headers=organizer_headers,
    )

    assert response.status_code == 409
    assert response.json()["code"] == "SEAT_ALREADY_LISTED"


def test_patch_ticket_price(client, organizer_headers, make_event, make_ticket):
    listing = make_event()
    ticket_id = make_ticket(listing.event_id, "A-1", "25.00")

    rejected = client.patch(
        f"/tickets/{ticket_id}",
        json={"price": -5},
        headers=organizer_headers,
    )
    assert rejected.status_code == 400

    accepted = client.patch(
        f"/tickets/{ticket_id}",
        json={"price": "30.00"},
        headers=organizer_headers,
    )
    assert accepted.status_code == 200
    assert accepted.json()["price"] == 30.0

    listed = client.get("/tickets", params={"eventId": listing.event_id})
    assert listed.json()[0]["price"] == 30.0


def test_delete_sold_ticket_is_conflict(
    client, organizer_headers, customer_headers, make_event, make_ticket
):
    listing = make_event()
    ticket_id = make_ticket(listing.event_id)
    client.post("/orders", json={"tickets": [ticket_id]}, headers=customer_headers)

    response = client.delete(f"/tickets/{ticket_id}", headers=organizer_headers)

    assert response.status_code == 409


def test_delete_available_ticket(client, organizer_headers, make_event, make_ticket):
    listing = make_event()
    ticket_id = make_ticket(listing.event_id)

    response = client.delete(f"/tickets/{ticket_id}", headers=organizer_headers)

    assert response.status_code == 204
    assert client.get("/tickets", params={"eventId": listing.event_id}).json() == []


def test_order_detail_hidden_from_other_users(
    client, customer_headers, make_event, make_ticket
):
    listing = make_event()
    ticket_id = make_ticket(listing.event_id)
    order_id = client.post(
        "/orders", json={"tickets": [ticket_id]}, headers=customer_headers
    ).json()["orderId"]

    response = client.get(
        f"/orders/{order_id}",
        headers={"X-User-Id": OTHER_CUSTOMER_ID, "X-User-Role": "Customer"},
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "No order information found."


def test_health(client):
    assert client.get("/health").status_code == 200


def test_lock_timeout_returns_retryable_503(
    client, db, customer_headers, make_event, make_ticket, monkeypatch
):
    listing = make_event()
    ticket_id = make_ticket(listing.event_id)

    def _timeout(self, ticket_ids):
        raise OperationalError("SELECT ... FOR UPDATE", {}, Exception("lock timeout"))

    monkeypatch.setattr(TicketRepository, "lock_tickets", _timeout)

    response = client.post("/orders", json={"tickets": [ticket_id]}, headers=customer_headers)

    assert response.status_code == 503
    assert response.json()["code"] == "STORAGE_UNAVAILABLE"
    assert response.headers["Retry-After"] == "1"
    assert db.execute(select(func.count(Order.id))).scalar_one() == 0
    assert db.get(Ticket, ticket_id).status == TicketStatus.AVAILABLE


def test_failed_write_returns_500_without_internals(
    client, db, customer_headers, make_event, make_ticket, monkeypatch
):
    listing = make_event()
    ticket_id = make_ticket(listing.event_id)

    def _duplicate(self, order_id, method, amount):
        raise IntegrityError("INSERT INTO payments", {}, Exception("duplicate key value"))

    monkeypatch.setattr(OrderRepository, "create_payment", _duplicate)

    response = client.post("/orders", json={"tickets": [ticket_id]}, headers=customer_headers)

    assert response.status_code == 500
    assert response.json() == {
        "code": "STORAGE_ERROR",
        "detail": "Server error during purchase.",
    }
    assert db.execute(select(func.count(Order.id))).scalar_one() == 0
    assert db.get(Ticket, ticket_id).status == TicketStatus.AVAILABLE


def test_unhandled_storage_errors_are_rendered(client, monkeypatch):
    def _down(self):
        raise OperationalError("SELECT venues", {}, Exception("connection refused"))

    monkeypatch.setattr(EventService, "list_venues", _down)
    unavailable = client.get("/venues")
    assert unavailable.status_code == 503
    assert unavailable.json()["code"] == "STORAGE_UNAVAILABLE"
    assert "Retry-After" in unavailable.headers

    def _broken(self):
        raise SQLAlchemyError("relation venues does not exist")

    monkeypatch.setattr(EventService, "list_venues", _broken)
    failed = client.get("/venues")
    assert failed.status_code == 500
    assert failed.json() == {"code": "STORAGE_ERROR", "detail": "Server error"}
