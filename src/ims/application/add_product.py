"""Application service: Add Product use case."""

from __future__ import annotations

import logging

from ims.domain.exceptions import DuplicateKeyError
from ims.domain.model.product import DEFAULT_MAX_STOCK_LEVEL, Product
from ims.domain.model.value_objects import Money
from ims.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, uow: UnitOfWork, currency: str = "USD") -> None:
        self._uow = uow
        self._currency = currency

    def handle(
        self,
        name: str,
        price: str,
        cost_price: str,
        stock_quantity: int = 0,
        min_stock_level: int = 0,
        max_stock_level: int = DEFAULT_MAX_STOCK_LEVEL,
        sku: str | None = None,
        category_id: str | None = None,
        **details: str | None,
    ) -> Product:
        """Add a new product to the catalog."""
        sku = sku.strip() if sku and sku.strip() else None

        with self._uow:
            if sku is not None and self._uow.products.get_by_sku(sku) is not None:
                raise DuplicateKeyError(f"SKU already exists: {sku}")

            product = Product.create(
                id=self._uow.products.next_id(),
                name=name,
                price=Money.of(price, self._currency),
                cost_price=Money.of(cost_price, self._currency),
                stock_quantity=stock_quantity,
                min_stock_level=min_stock_level,
                max_stock_level=max_stock_level,
                sku=sku,
                category_id=category_id,
                **details,
            )
            self._uow.products.save(product)
            self._uow.commit()

        logger.info("Product %s '%s' created", product.id, product.name)
        return product
