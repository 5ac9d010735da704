"""Application service: Update Product use case."""

from __future__ import annotations

import logging

from ims.domain.exceptions import EntityNotFoundError
from ims.domain.model.product import Product
from ims.domain.model.value_objects import Money
from ims.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork, currency: str = "USD") -> None:
        self._uow = uow
        self._currency = currency

    def handle(
        self,
        product_id: str,
        price: str | None = None,
        cost_price: str | None = None,
        min_stock_level: int | None = None,
        max_stock_level: int | None = None,
        is_active: bool | None = None,
    ) -> Product:
        """Update a product's catalog data.

        Price changes do NOT affect any existing orders; they captured a
        price snapshot at creation time.  Stock is moved with the
        Update Stock use case, not here.
        """
        with self._uow:
            product = self._uow.products.get_for_update(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            if price is not None:
                product.update_price(Money.of(price, self._currency))
            if cost_price is not None:
                product.update_cost_price(Money.of(cost_price, self._currency))
            if min_stock_level is not None or max_stock_level is not None:
                product.update_stock_levels(min_stock_level, max_stock_level)
            if is_active is not None:
                product.set_active(is_active)

            self._uow.products.save(product)
            self._uow.commit()

        logger.info("Product %s '%s' updated", product.id, product.name)
        return product
