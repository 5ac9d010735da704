"""Domain service: Stock Reservation.

Coordinates the cross-aggregate operation of taking stock out of the
catalog for a new order, and putting it back when an order is cancelled.

The two-phase approach (validate-then-mutate) ensures we never leave
stock partially consumed if one product fails validation.  Products are
always locked in sorted ID order so that two concurrent orders sharing
products cannot deadlock.
"""

from __future__ import annotations

from ims.domain.exceptions import InsufficientStockError
from ims.domain.model.order import Order
from ims.domain.model.product import Product
from ims.domain.service.catalog_store import CatalogStore


class StockReservationService:

    def __init__(self, catalog: CatalogStore) -> None:
        self._catalog = catalog

    def check_availability(self, quantities: dict[str, int]) -> dict[str, Product]:
        """Lock and validate every requested product.  Mutates nothing.

        ``quantities`` maps product ID to the total quantity requested
        across all lines of the order.

        Raises EntityNotFoundError, ValidationError (inactive product) or
        InsufficientStockError naming the first product that fails.
        """
        products: dict[str, Product] = {}
        for product_id in sorted(quantities):
            product = self._catalog.lock_for_order(product_id)
            requested = quantities[product_id]
            if product.stock_quantity < requested:
                raise InsufficientStockError(
                    product.name, requested, product.stock_quantity
                )
            products[product_id] = product
        return products

    def reserve(self, quantities: dict[str, int]) -> dict[str, Product]:
        """Consume stock for every requested product, or for none of them.

          Phase 1, lock and validate: ensure every product has enough
                    stock.  Fails fast before any mutation.
          Phase 2, mutate: decrement each product through the catalog.
        """
        self.check_availability(quantities)
        return {
            product_id: self._catalog.adjust_stock(product_id, -qty)
            for product_id, qty in sorted(quantities.items())
        }

    def restore_for_order(self, order: Order) -> None:
        """Put every line item's quantity back into its product's stock."""
        for product_id, qty in sorted(order.quantities_by_product().items()):
            self._catalog.adjust_stock(product_id, qty)
