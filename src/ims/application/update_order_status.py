"""Application service: Update Order Status use case.

Order status and payment status are independent: either may be left
unchanged by passing ``None``.  Cancellation is not a status update; it
goes through the Cancel Order use case so that stock is restored.
"""

from __future__ import annotations

import logging

from ims.application.dto import OrderDTO, order_to_dto
from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.model.order import OrderStatus, PaymentStatus
from ims.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        order_id: int,
        order_status: OrderStatus | None = None,
        payment_status: PaymentStatus | None = None,
        notes: str | None = None,
    ) -> OrderDTO:
        if order_status is None and payment_status is None and not notes:
            raise ValidationError("Nothing to update: give a status, a payment status or notes")

        with self._uow:
            order = self._uow.orders.get_for_update(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            if order_status is not None:
                order.transition_to(order_status)
            if payment_status is not None:
                order.update_payment_status(payment_status)
            if notes:
                order.append_note(notes.strip())

            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Order %s updated: status=%s payment=%s",
            order.order_number, order.order_status.value, order.payment_status.value,
        )
        return order_to_dto(order)
