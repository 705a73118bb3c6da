import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import OperationalError, SQLAlchemyError, TimeoutError as SQLAlchemyTimeoutError
from sqlalchemy.orm import Session

from boxoffice.domain.auth import AuthContext
from boxoffice.domain.exceptions import (
    BoxOfficeError,
    NotFoundError,
    StorageError,
    StorageUnavailableError,
    TicketUnavailableError,
    ValidationError,
)
from boxoffice.domain.state_machine import TicketStateMachine, TicketStatus
from boxoffice.domain.validators import validate_pay_method
from boxoffice.infrastructure.db.models import Order
from boxoffice.infrastructure.db.session import apply_lock_timeout
from boxoffice.infrastructure.repositories.order_repository import OrderRepository
from boxoffice.infrastructure.repositories.ticket_repository import TicketRepository

logger = logging.getLogger(__name__)

DEFAULT_PAY_METHOD = "Credit"


@dataclass(frozen=True)
class OrderReceipt:
    order_id: str
    amount: Decimal


class OrderService:
    """
    Turns a set of ticket ids into a paid order.

    The purchase runs as one transaction on a session that has not
    begun one yet: the requested tickets are row-locked, checked,
    summed, and flipped to Sold together with the Order and Payment
    inserts. Any failure rolls the whole unit back; nothing is retried.
    """

    def __init__(self, db: Session):
        self.db = db
        self.order_repository = OrderRepository(db)
        self.ticket_repository = TicketRepository(db)

    def place_order(
        self,
        auth: AuthContext,
        ticket_ids: Any,
        pay_method: Any = DEFAULT_PAY_METHOD,
    ) -> OrderReceipt:
        requested = self._validate_ticket_ids(ticket_ids)
        method = validate_pay_method(pay_method)

        try:
            with self.db.begin():
                apply_lock_timeout(self.db)
                receipt = self._claim_tickets(auth, requested, method)
        except BoxOfficeError as exc:
            logger.warning(
                "Order rejected for user %s tickets=%s: %s",
                auth.user_id,
                requested,
                exc.message,
            )
            raise
        except (OperationalError, SQLAlchemyTimeoutError) as exc:
            logger.exception("Storage unavailable while placing order for user %s", auth.user_id)
            raise StorageUnavailableError(
                "Tickets are busy or the database is unavailable. Please retry."
            ) from exc
        except SQLAlchemyError as exc:
            logger.exception("Storage failure while placing order for user %s", auth.user_id)
            raise StorageError("Server error during purchase.") from exc

        logger.info(
            "Order %s placed by user %s for %s tickets, amount=%s",
            receipt.order_id,
            auth.user_id,
            len(requested),
            receipt.amount,
        )
        return receipt

    def get_order(self, auth: AuthContext, order_id: str) -> Order:
        order = self.order_repository.get_for_user(order_id, auth.user_id)
        if order is None:
            raise NotFoundError("No order information found.")
        return order

    def list_orders(self, auth: AuthContext) -> list[Order]:
        return self.order_repository.list_for_user(auth.user_id)

    def _claim_tickets(
        self,
        auth: AuthContext,
        ticket_ids: list[str],
        method: str,
    ) -> OrderReceipt:
        locked = self.ticket_repository.lock_tickets(ticket_ids)
        if len(locked) != len(ticket_ids):
            raise NotFoundError("Some tickets not found")

        for ticket in locked:
            if ticket.status != TicketStatus.AVAILABLE:
                raise TicketUnavailableError(ticket.id, ticket.status.value)

        # Stored prices at lock time are authoritative.
        total = sum((Decimal(ticket.price) for ticket in locked), Decimal("0.00"))

        order = self.order_repository.create_order(users_id=auth.user_id, amount=total)
        self.order_repository.create_payment(
            order_id=order.id,
            method=method,
            amount=total,
        )
        for ticket in locked:
            TicketStateMachine.validate_transition(ticket.status, TicketStatus.SOLD)
        self.ticket_repository.mark_sold(locked, order.id)
        self.db.flush()

        return OrderReceipt(order_id=order.id, amount=total)

    @staticmethod
    def _validate_ticket_ids(ticket_ids: Any) -> list[str]:
        if not isinstance(ticket_ids, list) or len(ticket_ids) == 0:
            raise ValidationError("No tickets provided.")
        if not all(isinstance(ticket_id, str) and ticket_id for ticket_id in ticket_ids):
            raise ValidationError("Ticket ids must be non-empty strings.")
        if len(set(ticket_ids)) != len(ticket_ids):
            raise ValidationError("Ticket ids must not repeat.")
        return list(ticket_ids)
