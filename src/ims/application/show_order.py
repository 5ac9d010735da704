"""Application service: Show Order use case (query)."""

from __future__ import annotations

from ims.application.dto import OrderDTO, order_to_dto
from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        order_id: int | None = None,
        order_number: str | None = None,
    ) -> OrderDTO:
        if (order_id is None) == (order_number is None):
            raise ValidationError("Give exactly one of order ID or order number")

        with self._uow:
            if order_id is not None:
                order = self._uow.orders.get_by_id(order_id)
                label = f"#{order_id}"
            else:
                order = self._uow.orders.get_by_order_number(order_number)  # type: ignore[arg-type]
                label = f"{order_number}"
        if order is None:
            raise EntityNotFoundError(f"Order {label} not found")
        return order_to_dto(order)
