"""Application service: List Products use case (query).

Filters combine with AND.  Free-text search matches name, SKU and
description case-insensitively; brand and supplier match exactly,
ignoring case.
"""

from __future__ import annotations

from decimal import Decimal

from ims.application.dto import ProductDTO, product_to_dto
from ims.domain.exceptions import ValidationError
from ims.domain.model.product import Product
from ims.domain.model.value_objects import Money
from ims.domain.repository.unit_of_work import UnitOfWork


class ListProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        search: str | None = None,
        category_id: str | None = None,
        brand: str | None = None,
        supplier: str | None = None,
        min_price: str | None = None,
        max_price: str | None = None,
        include_inactive: bool = False,
    ) -> list[ProductDTO]:
        low = Money.of(min_price).amount if min_price is not None else None
        high = Money.of(max_price).amount if max_price is not None else None
        if low is not None and high is not None and low > high:
            raise ValidationError("Minimum price must not be above maximum price")

        with self._uow:
            products = self._uow.products.list_all()

        needle = search.strip().lower() if search and search.strip() else None
        selected = [
            p for p in products
            if (include_inactive or p.is_active)
            and (needle is None or _matches(p, needle))
            and (category_id is None or p.category_id == category_id)
            and (brand is None or _same(p.brand, brand))
            and (supplier is None or _same(p.supplier, supplier))
            and _in_range(p.price.amount, low, high)
        ]
        selected.sort(key=lambda p: (len(p.id), p.id))
        return [product_to_dto(p) for p in selected]


def _matches(product: Product, needle: str) -> bool:
    haystack = (product.name, product.sku, product.description)
    return any(needle in value.lower() for value in haystack if value)


def _same(value: str | None, wanted: str) -> bool:
    return value is not None and value.lower() == wanted.strip().lower()


def _in_range(price: Decimal, low: Decimal | None, high: Decimal | None) -> bool:
    return (low is None or price >= low) and (high is None or price <= high)
