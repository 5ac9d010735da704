"""Application service: Create Order use case.

Orchestrates the flow between the catalog and the Order aggregate.
Stock consumption and the new order are committed in one unit of work,
so a failure at any step leaves every product's stock untouched.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from ims.application.dto import OrderDTO, OrderLineRequest, order_to_dto
from ims.domain.exceptions import ValidationError
from ims.domain.model.order import CustomerInfo, Order, OrderLineItem, PaymentMethod
from ims.domain.model.user import UserRef
from ims.domain.model.value_objects import Money, Quantity
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.catalog_store import CatalogStore
from ims.domain.service.order_numbers import generate_order_number
from ims.domain.service.stock_reservation_service import StockReservationService

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(self, uow: UnitOfWork, currency: str = "USD") -> None:
        self._uow = uow
        self._currency = currency

    def handle(
        self,
        user: UserRef,
        customer: CustomerInfo,
        payment_method: PaymentMethod,
        lines: list[OrderLineRequest],
        notes: str | None = None,
        tax_amount: str | None = None,
        discount_amount: str | None = None,
    ) -> OrderDTO:
        """Place a new order and consume its stock.

        Steps:
        1. Lock and validate every product (exists, active, enough stock).
           Quantities for the same product on several lines are summed.
        2. Build line items with the *caller-supplied* prices.
        3. Let the Order aggregate compute totals.
        4. Decrement stock for every product.
        5. Persist the order and the stock changes together.
        """
        if not lines:
            raise ValidationError("Order must contain at least one item")

        requested: dict[str, int] = {}
        for line in lines:
            qty = Quantity(line.quantity).value
            requested[line.product_id] = requested.get(line.product_id, 0) + qty

        now = datetime.now(timezone.utc)
        with self._uow:
            reservations = StockReservationService(CatalogStore(self._uow.products))
            products = reservations.check_availability(requested)

            line_items = [
                OrderLineItem(
                    product_id=line.product_id,
                    product_name=products[line.product_id].name,
                    quantity=Quantity(line.quantity),
                    price=Money.of(line.price, self._currency),  # <-- price snapshot
                    discount_amount=Money.of(line.discount_amount, self._currency),
                    notes=line.notes,
                )
                for line in lines
            ]

            order = Order.create(
                order_number=generate_order_number(now),
                created_by=user.user_id,
                customer=customer,
                payment_method=payment_method,
                items=line_items,
                tax_amount=self._money_or_none(tax_amount),
                discount_amount=self._money_or_none(discount_amount),
                notes=notes,
                now=now,
            )

            reservations.reserve(requested)
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Order %s created by %s for %s (%d lines, total %s)",
            order.order_number, user, customer.name, len(order.items), order.total_amount,
        )
        return order_to_dto(order)

    def _money_or_none(self, amount: str | None) -> Money | None:
        if amount is None:
            return None
        return Money.of(amount, self._currency)
