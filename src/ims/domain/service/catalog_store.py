"""Domain service: Catalog Store.

The single entry point for reading products on behalf of an order and
for moving their stock.  Every stock movement goes through
``adjust_stock`` which reads the product under its lock and rejects the
movement before anything changes if stock would go negative.
"""

from __future__ import annotations

import logging

from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.model.product import Product
from ims.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class CatalogStore:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def get_for_order(self, product_id: str) -> Product:
        """Return a snapshot of an orderable (existing, active) product."""
        product = self._product_repo.get_by_id(product_id)
        return self._check_orderable(product_id, product)

    def lock_for_order(self, product_id: str) -> Product:
        """Like ``get_for_order`` but holds the product's lock afterwards."""
        product = self._product_repo.get_for_update(product_id)
        return self._check_orderable(product_id, product)

    def adjust_stock(self, product_id: str, delta: int) -> Product:
        """Apply a signed stock movement (negative consumes, positive restores)."""
        product = self._product_repo.get_for_update(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        before = product.stock_quantity
        product.adjust_stock(delta)
        self._product_repo.save(product)

        logger.info(
            "Stock adjusted for product %s (%s): %d -> %d",
            product.id, product.name, before, product.stock_quantity,
        )
        if delta < 0 and product.is_low_stock:
            logger.warning(
                "Product %s (%s) is low on stock: %d left, minimum %d",
                product.id, product.name, product.stock_quantity, product.min_stock_level,
            )
        return product

    @staticmethod
    def _check_orderable(product_id: str, product: Product | None) -> Product:
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        if not product.is_active:
            raise ValidationError(f"Product '{product.name}' is not active")
        return product
