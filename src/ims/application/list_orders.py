"""Application service: List Orders use case (query).

Filters combine with AND.  Results are newest first.
"""

from __future__ import annotations

from datetime import datetime

from ims.application.dto import OrderDTO, order_to_dto
from ims.domain.exceptions import ValidationError
from ims.domain.model.order import Order, OrderStatus, PaymentStatus
from ims.domain.repository.unit_of_work import UnitOfWork


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        order_status: OrderStatus | None = None,
        payment_status: PaymentStatus | None = None,
        search: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> list[OrderDTO]:
        if start is not None and end is not None and start > end:
            raise ValidationError("Start date must not be after end date")
        if limit is not None and limit <= 0:
            raise ValidationError("Limit must be positive")

        with self._uow:
            orders = self._uow.orders.list_all()

        needle = search.strip().lower() if search and search.strip() else None
        matches = [
            o for o in orders
            if (order_status is None or o.order_status == order_status)
            and (payment_status is None or o.payment_status == payment_status)
            and (start is None or o.order_date >= start)
            and (end is None or o.order_date <= end)
            and (needle is None or _matches(o, needle))
        ]
        matches.sort(key=lambda o: o.order_date, reverse=True)
        if limit is not None:
            matches = matches[:limit]
        return [order_to_dto(o) for o in matches]


def _matches(order: Order, needle: str) -> bool:
    haystack = (
        order.order_number,
        order.customer.name,
        order.customer.email,
        order.customer.phone,
    )
    return any(needle in value.lower() for value in haystack if value)
