"""Application service: Cancel Order use case.

Restores every line item's quantity to its product's stock, then marks
the order CANCELLED.  Both happen in one unit of work: if any product
cannot be restored, the order is left exactly as it was.

DELIVERED and already-CANCELLED orders cannot be cancelled; in both
cases stock is not touched.
"""

from __future__ import annotations

import logging

from ims.application.dto import OrderDTO, order_to_dto
from ims.domain.exceptions import EntityNotFoundError
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.catalog_store import CatalogStore
from ims.domain.service.stock_reservation_service import StockReservationService

logger = logging.getLogger(__name__)

DEFAULT_CANCEL_REASON = "No reason provided"


class CancelOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, reason: str | None = None) -> OrderDTO:
        with self._uow:
            order = self._uow.orders.get_for_update(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            # The order lock is taken before any product lock.
            # Check before touching stock.
            order.ensure_cancellable()

            svc = StockReservationService(CatalogStore(self._uow.products))
            svc.restore_for_order(order)

            order.cancel(reason or DEFAULT_CANCEL_REASON)
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info("Order %s cancelled", order.order_number)
        return order_to_dto(order)
