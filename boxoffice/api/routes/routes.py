from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from boxoffice.api.dependencies import get_auth_context, get_db, require_organizer
from boxoffice.api.schemas.schemas import (
    EventCreate,
    EventResponse,
    EventUpdate,
    OrderDetailResponse,
    OrderReceiptResponse,
    OrderRequest,
    OrderSummaryResponse,
    OrderTicketResponse,
    PaymentResponse,
    SeatResponse,
    TicketCreate,
    TicketCreatedResponse,
    TicketResponse,
    TicketUpdate,
    VenueCreate,
    VenueResponse,
)
from boxoffice.application.event_service import EventService
from boxoffice.application.order_service import OrderService
from boxoffice.application.ticket_catalog import TicketCatalog
from boxoffice.domain.auth import AuthContext
from boxoffice.domain.state_machine import EventStatus, TicketStatus
from boxoffice.infrastructure.db.models import Order


router = APIRouter()


def _order_detail(order: Order) -> OrderDetailResponse:
    payment = None
    if order.payment is not None:
        payment = PaymentResponse(
            id=order.payment.id,
            method=order.payment.method,
            amount=order.payment.amount,
            status=order.payment.status.value,
        )
    return OrderDetailResponse(
        order=OrderSummaryResponse(
            id=order.id,
            amount=order.amount,
            status=order.status.value,
            created_at=order.created_at,
        ),
        tickets=[
            OrderTicketResponse(
                id=ticket.id,
                event_id=ticket.event_id,
                event_title=ticket.event.title,
                seat_id=ticket.seat_id,
                row_label=ticket.seat.row_label,
                seat_number=ticket.seat.seat_number,
                price=ticket.price,
                status=ticket.status,
            )
            for ticket in order.tickets
        ],
        payment=payment,
    )


@router.get("/health")
def health():
    return {"message": "BoxOffice is running"}


# -----------------------------
# Orders
# -----------------------------
@router.post(
    "/orders",
    response_model=OrderReceiptResponse,
    status_code=status.HTTP_201_CREATED,
)
def place_order(
    request: OrderRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    receipt = OrderService(db).place_order(
        auth=auth,
        ticket_ids=request.tickets,
        pay_method=request.pay_method,
    )
    return OrderReceiptResponse(order_id=receipt.order_id, amount=receipt.amount)


@router.get("/orders", response_model=list[OrderSummaryResponse])
def list_orders(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    orders = OrderService(db).list_orders(auth)
    return [
        OrderSummaryResponse(
            id=order.id,
            amount=order.amount,
            status=order.status.value,
            created_at=order.created_at,
        )
        for order in orders
    ]


@router.get("/orders/{order_id}", response_model=OrderDetailResponse)
def get_order(
    order_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    order = OrderService(db).get_order(auth, order_id)
    return _order_detail(order)


# -----------------------------
# Tickets
# -----------------------------
@router.get("/tickets", response_model=list[TicketResponse])
def list_tickets(
    event_id: str | None = Query(default=None, alias="eventId"),
    ticket_status: TicketStatus | None = Query(default=None, alias="status"),
    limit: int = 20,
    offset: int = 0,
    db: Session = Depends(get_db),
):
    tickets = TicketCatalog(db).list_tickets(
        event_id=event_id,
        status=ticket_status,
        limit=limit,
        offset=offset,
    )
    return [TicketResponse.model_validate(ticket) for ticket in tickets]


@router.post(
    "/tickets",
    response_model=TicketCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_ticket(
    request: TicketCreate,
    auth: AuthContext = Depends(require_organizer),
    db: Session = Depends(get_db),
):
    ticket = TicketCatalog(db).create_ticket(
        organizer_id=auth.user_id,
        event_id=request.event_id,
        seat_label=request.seat_label,
        price=request.price,
    )
    return TicketCreatedResponse(ticket_id=ticket.id)


@router.patch("/tickets/{ticket_id}", response_model=TicketResponse)
def update_ticket(
    ticket_id: str,
    request: TicketUpdate,
    auth: AuthContext = Depends(require_organizer),
    db: Session = Depends(get_db),
):
    ticket = TicketCatalog(db).update_ticket(
        organizer_id=auth.user_id,
        ticket_id=ticket_id,
        price=request.price,
        status=request.status,
    )
    return TicketResponse.model_validate(ticket)


@router.delete("/tickets/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ticket(
    ticket_id: str,
    auth: AuthContext = Depends(require_organizer),
    db: Session = Depends(get_db),
):
    TicketCatalog(db).delete_ticket(organizer_id=auth.user_id, ticket_id=ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -----------------------------
# Venues
# -----------------------------
@router.get("/venues", response_model=list[VenueResponse])
def list_venues(db: Session = Depends(get_db)):
    return [VenueResponse.model_validate(venue) for venue in EventService(db).list_venues()]


@router.post(
    "/venues",
    response_model=VenueResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_venue(
    request: VenueCreate,
    auth: AuthContext = Depends(require_organizer),
    db: Session = Depends(get_db),
):
    venue = EventService(db).create_venue(
        name=request.name,
        city=request.city,
        address=request.address,
    )
    return VenueResponse.model_validate(venue)


# -----------------------------
# Public events
# -----------------------------
@router.get("/events", response_model=list[EventResponse])
def search_events(
    q: str | None = None,
    city: str | None = None,
    event_status: EventStatus | None = Query(default=None, alias="status"),
    limit: int = 20,
    offset: int = 0,
    db: Session = Depends(get_db),
):
    events = EventService(db).search_events(
        query=q,
        city=city,
        status=event_status,
        limit=limit,
        offset=offset,
    )
    return [EventResponse.model_validate(event) for event in events]


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event(event_id: str, db: Session = Depends(get_db)):
    return EventResponse.model_validate(EventService(db).get_event(event_id))


# -----------------------------
# Organizer events
# -----------------------------
@router.get("/organizer/events", response_model=list[EventResponse])
def list_organizer_events(
    auth: AuthContext = Depends(require_organizer),
    db: Session = Depends(get_db),
):
    events = EventService(db).list_organizer_events(auth.user_id)
    return [EventResponse.model_validate(event) for event in events]


@router.post(
    "/organizer/events",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_organizer_event(
    request: EventCreate,
    auth: AuthContext = Depends(require_organizer),
    db: Session = Depends(get_db),
):
    event = EventService(db).create_event(
        organizer_id=auth.user_id,
        venue_id=request.venue_id,
        title=request.title,
        description=request.description,
        start_time=request.start_time,
        end_time=request.end_time,
        standard_price=request.standard_price,
        status=request.status,
    )
    return EventResponse.model_validate(event)


@router.get("/organizer/events/{event_id}", response_model=EventResponse)
def get_organizer_event(
    event_id: str,
    auth: AuthContext = Depends(require_organizer),
    db: Session = Depends(get_db),
):
    event = EventService(db).get_organizer_event(auth.user_id, event_id)
    return EventResponse.model_validate(event)


@router.patch("/organizer/events/{event_id}", response_model=EventResponse)
def update_organizer_event(
    event_id: str,
    request: EventUpdate,
    auth: AuthContext = Depends(require_organizer),
    db: Session = Depends(get_db),
):
    event = EventService(db).update_event(
        organizer_id=auth.user_id,
        event_id=event_id,
        changes=request.model_dump(exclude_unset=True),
    )
    return EventResponse.model_validate(event)


@router.delete("/organizer/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_organizer_event(
    event_id: str,
    auth: AuthContext = Depends(require_organizer),
    db: Session = Depends(get_db),
):
    EventService(db).delete_event(auth.user_id, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/organizer/events/{event_id}/available-seats",
    response_model=list[SeatResponse],
)
def list_available_seats(
    event_id: str,
    auth: AuthContext = Depends(require_organizer),
    db: Session = Depends(get_db),
):
    seats = TicketCatalog(db).list_available_seats(auth.user_id, event_id)
    return [SeatResponse.model_validate(seat) for seat in seats]
