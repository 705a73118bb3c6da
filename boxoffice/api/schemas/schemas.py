from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from boxoffice.domain.state_machine import EventStatus, TicketStatus


class CamelModel(BaseModel):
    """JSON keys are camelCase on the wire; snake_case is accepted on input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# -----------------------------
# Orders
# -----------------------------
class OrderRequest(CamelModel):
    tickets: list[str]
    pay_method: str = "Credit"


class OrderReceiptResponse(CamelModel):
    order_id: str
    amount: float


class OrderTicketResponse(CamelModel):
    id: str
    event_id: str
    event_title: str
    seat_id: str
    row_label: str
    seat_number: int
    price: float
    status: TicketStatus


class PaymentResponse(CamelModel):
    id: str
    method: str
    amount: float
    status: str


class OrderSummaryResponse(CamelModel):
    id: str
    amount: float
    status: str
    created_at: datetime


class OrderDetailResponse(CamelModel):
    order: OrderSummaryResponse
    tickets: list[OrderTicketResponse]
    payment: PaymentResponse | None = None


# -----------------------------
# Tickets
# -----------------------------
class TicketCreate(CamelModel):
    event_id: str
    seat_label: str
    price: Decimal


class TicketCreatedResponse(CamelModel):
    ticket_id: str


class TicketUpdate(CamelModel):
    price: Decimal | None = None
    status: TicketStatus | None = None


class TicketResponse(CamelModel):
    id: str
    event_id: str
    seat_id: str
    price: float
    status: TicketStatus
    order_id: str | None = None


class SeatResponse(CamelModel):
    id: str
    section_id: str
    row_label: str
    seat_number: int
    label: str


# -----------------------------
# Venues and events
# -----------------------------
class VenueCreate(CamelModel):
    name: str
    city: str
    address: str


class VenueResponse(CamelModel):
    id: str
    name: str
    city: str
    address: str


class EventCreate(CamelModel):
    venue_id: str
    title: str
    description: str | None = None
    start_time: datetime
    end_time: datetime
    standard_price: Decimal = Field(ge=0)
    status: EventStatus = EventStatus.SCHEDULED


class EventUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    venue_id: str | None = None
    title: str | None = None
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    standard_price: Decimal | None = Field(default=None, ge=0)
    status: EventStatus | None = None


class EventResponse(CamelModel):
    id: str
    organizer_id: str
    venue_id: str
    title: str
    description: str
    start_time: datetime
    end_time: datetime
    standard_price: float
    status: EventStatus
