# boxoffice/infrastructure/repositories/order_repository.py

from decimal import Decimal

from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select

from boxoffice.infrastructure.db.models import Order, Payment, Ticket
from boxoffice.domain.state_machine import OrderStatus, PaymentStatus


class OrderRepository:

    def __init__(self, db: Session):
        self.db = db

    def create_order(self, users_id: str, amount: Decimal) -> Order:
        order = Order(
            users_id=users_id,
            amount=amount,
            status=OrderStatus.PAID,
        )
        self.db.add(order)
        self.db.flush()
        return order

    def create_payment(
        self,
        order_id: str,
        method: str,
        amount: Decimal,
    ) -> Payment:
        payment = Payment(
            order_id=order_id,
            method=method,
            amount=amount,
            status=PaymentStatus.COMPLETED,
        )
        self.db.add(payment)
        return payment

    def get_for_user(self, order_id: str, users_id: str) -> Order | None:
        stmt = (
            select(Order)
            .where(Order.id == order_id)
            .where(Order.users_id == users_id)
            .options(
                selectinload(Order.tickets).selectinload(Ticket.seat),
                selectinload(Order.tickets).selectinload(Ticket.event),
                selectinload(Order.payment),
            )
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_for_user(self, users_id: str) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.users_id == users_id)
            .order_by(Order.created_at.desc(), Order.id)
            .options(selectinload(Order.payment))
        )
        return list(self.db.execute(stmt).scalars().all())
