"""Application service: Delete Product use case.

A product still on an open (not delivered, not cancelled) order cannot
be deleted: cancelling that order would have nowhere to return stock to.
The check is repeated when the unit of work commits.
"""

from __future__ import annotations

import logging

from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class DeleteProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str) -> None:
        with self._uow:
            product = self._uow.products.get_for_update(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            for order in self._uow.orders.list_all():
                if order.order_status.is_terminal:
                    continue
                if product_id in order.quantities_by_product():
                    raise ValidationError(
                        f"Product '{product.name}' is on open order "
                        f"{order.order_number} and cannot be deleted"
                    )

            self._uow.products.delete(product_id)
            self._uow.commit()

        logger.info("Product %s '%s' deleted", product.id, product.name)
