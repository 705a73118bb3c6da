# boxoffice/infrastructure/db/models.py

from sqlalchemy import (
    String,
    Integer,
    DateTime,
    Enum,
    Numeric,
    Text,
    UniqueConstraint,
    CheckConstraint,
    ForeignKey,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from boxoffice.infrastructure.db.session import Base
from boxoffice.domain.state_machine import (
    EventStatus,
    OrderStatus,
    PaymentStatus,
    TicketStatus,
)


class Venue(Base):
    __tablename__ = "venues"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    city: Mapped[str] = mapped_column(String(64), nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    sections: Mapped[list["Section"]] = relationship(back_populates="venue")


class Section(Base):
    __tablename__ = "sections"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    venue_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("venues.id"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)

    venue: Mapped[Venue] = relationship(back_populates="sections")
    seats: Mapped[list["Seat"]] = relationship(back_populates="section")

    __table_args__ = (
        # Backs the find-or-create in seat provisioning.
        UniqueConstraint("venue_id", "name", name="uq_section_venue_name"),
        CheckConstraint("capacity >= 0", name="ck_section_capacity_nonnegative"),
    )


class Seat(Base):
    """
    A physical seat. Immutable once created; tickets
    reference it per event.
    """

    __tablename__ = "seats"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    section_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sections.id"),
        nullable=False,
    )
    row_label: Mapped[str] = mapped_column(String(8), nullable=False)
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)

    section: Mapped[Section] = relationship(back_populates="seats")

    __table_args__ = (
        UniqueConstraint(
            "section_id",
            "row_label",
            "seat_number",
            name="uq_seat_section_row_number",
        ),
        CheckConstraint("seat_number > 0", name="ck_seat_number_positive"),
    )

    @property
    def label(self) -> str:
        return f"{self.row_label}-{self.seat_number}"


class Event(Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    organizer_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    venue_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("venues.id"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    standard_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[EventStatus] = mapped_column(
        Enum(EventStatus, name="event_status"),
        nullable=False,
        default=EventStatus.SCHEDULED,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    venue: Mapped[Venue] = relationship()

    __table_args__ = (
        CheckConstraint("standard_price >= 0", name="ck_event_price_nonnegative"),
    )


class Ticket(Base):
    """
    A sellable (event, seat) pairing.
    Status moves Available -> Sold only inside an order transaction.
    """

    __tablename__ = "tickets"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    event_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("events.id"),
        nullable=False,
    )
    seat_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("seats.id"),
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[TicketStatus] = mapped_column(
        Enum(TicketStatus, name="ticket_status"),
        nullable=False,
        default=TicketStatus.AVAILABLE,
    )
    order_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("orders.id"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    seat: Mapped[Seat] = relationship()
    event: Mapped[Event] = relationship()

    __table_args__ = (
        UniqueConstraint(
            "event_id",
            "seat_id",
            name="uq_ticket_event_seat",
        ),
        CheckConstraint("price >= 0", name="ck_ticket_price_nonnegative"),
    )


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    users_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, name="order_status"),
        nullable=False,
        default=OrderStatus.PAID,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    tickets: Mapped[list[Ticket]] = relationship(order_by=Ticket.id)
    payment: Mapped[Optional["Payment"]] = relationship(
        back_populates="order",
        uselist=False,
    )

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_order_amount_nonnegative"),
    )


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    order_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("orders.id"),
        nullable=False,
    )
    method: Mapped[str] = mapped_column(String(32), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status"),
        nullable=False,
        default=PaymentStatus.COMPLETED,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    order: Mapped[Order] = relationship(back_populates="payment")

    __table_args__ = (
        UniqueConstraint("order_id", name="uq_payment_order_id"),
    )
