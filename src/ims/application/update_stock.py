"""Application service: Update Stock use case.

Manual stock corrections by catalog staff (deliveries, write-offs,
stock counts).  ADD and SUBTRACT go through the Catalog Store like any
order would; SET overwrites the quantity under the product's lock.
"""

from __future__ import annotations

import logging
from enum import Enum

from ims.application.dto import ProductDTO, product_to_dto
from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


class StockOperation(Enum):
    ADD = "ADD"
    SUBTRACT = "SUBTRACT"
    SET = "SET"


class UpdateStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: str,
        operation: StockOperation,
        quantity: int,
        notes: str | None = None,
    ) -> ProductDTO:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        with self._uow:
            catalog = CatalogStore(self._uow.products)
            if operation is StockOperation.ADD:
                product = catalog.adjust_stock(product_id, quantity)
            elif operation is StockOperation.SUBTRACT:
                product = catalog.adjust_stock(product_id, -quantity)
            else:
                product = self._uow.products.get_for_update(product_id)
                if product is None:
                    raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
                product.set_stock(quantity)
                self._uow.products.save(product)
            self._uow.commit()

        logger.info(
            "Stock %s %d for product %s '%s'%s",
            operation.value, quantity, product.id, product.name,
            f" ({notes})" if notes else "",
        )
        return product_to_dto(product)
