"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from enum import Enum

from ims.application.dto import ProductDTO, product_to_dto
from ims.domain.model.product import Product
from ims.domain.repository.unit_of_work import UnitOfWork


class StockFilter(Enum):
    ALL = "all"
    LOW = "low"
    OUT = "out"
    OVER = "over"


_PREDICATES = {
    StockFilter.ALL: lambda p: True,
    StockFilter.LOW: lambda p: p.is_low_stock,
    StockFilter.OUT: lambda p: p.is_out_of_stock,
    StockFilter.OVER: lambda p: p.is_overstocked,
}


class ShowInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        stock_filter: StockFilter = StockFilter.ALL,
        include_inactive: bool = False,
    ) -> list[ProductDTO]:
        """Return products in ID order, optionally only those needing attention."""
        with self._uow:
            products = self._uow.products.list_all()

        predicate = _PREDICATES[stock_filter]
        selected: list[Product] = [
            p for p in products
            if (include_inactive or p.is_active) and predicate(p)
        ]
        selected.sort(key=lambda p: (len(p.id), p.id))
        return [product_to_dto(p) for p in selected]
