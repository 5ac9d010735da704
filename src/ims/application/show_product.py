"""Application service: Show Product use case (query)."""

from __future__ import annotations

from ims.application.dto import ProductDTO, product_to_dto
from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.repository.unit_of_work import UnitOfWork


class ShowProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str | None = None, sku: str | None = None) -> ProductDTO:
        if (product_id is None) == (sku is None):
            raise ValidationError("Give exactly one of product ID or SKU")

        with self._uow:
            if product_id is not None:
                product = self._uow.products.get_by_id(product_id)
                label = f"ID '{product_id}'"
            else:
                product = self._uow.products.get_by_sku(sku)  # type: ignore[arg-type]
                label = f"SKU '{sku}'"
        if product is None:
            raise EntityNotFoundError(f"Product with {label} not found")
        return product_to_dto(product)
