"""JSON-document-backed implementation of OrderRepository."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from decimal import Decimal

from ims.domain.model.order import (
    CustomerInfo,
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from ims.domain.model.value_objects import Money, Quantity
from ims.domain.repository.order_repository import OrderRepository
from ims.infrastructure.persistence.json_store import JsonDocumentStore

logger = logging.getLogger(__name__)


class JsonOrderRepository(OrderRepository):

    def __init__(self, store: JsonDocumentStore, records: list[dict]) -> None:
        self._store = store
        self._records = {raw["id"]: raw for raw in records}
        self._loaded: dict[int, Order] = {}
        self._dirty: set[int] = set()
        self._held_locks: dict[int, threading.Lock] = {}

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        if order_id in self._loaded:
            return self._loaded[order_id]
        raw = self._records.get(order_id)
        if raw is None:
            return None
        order = self._loaded[order_id] = self._to_domain(raw)
        return order

    def get_for_update(self, order_id: int) -> Order | None:
        if order_id in self._held_locks:
            return self.get_by_id(order_id)

        lock = self._store.order_lock(order_id)
        lock.acquire()
        self._held_locks[order_id] = lock
        logger.debug("Locked order %s", order_id)

        raw = self._store.load_order(order_id)
        if raw is None:
            return None
        self._records[order_id] = raw
        order = self._loaded[order_id] = self._to_domain(raw)
        return order

    def get_by_order_number(self, order_number: str) -> Order | None:
        for order in self.list_all():
            if order.order_number == order_number:
                return order
        return None

    def list_all(self) -> list[Order]:
        ids = list(self._records) + [oid for oid in self._loaded if oid not in self._records]
        return [self.get_by_id(oid) for oid in ids]  # type: ignore[misc]

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self._store.next_order_id()
        self._loaded[order.id] = order
        self._dirty.add(order.id)

    # --- Unit of work hooks ---------------------------------------------------

    def staged_records(self) -> list[dict]:
        return [self._to_raw(self._loaded[oid]) for oid in sorted(self._dirty)]

    def mark_clean(self) -> None:
        for oid in self._dirty:
            self._records[oid] = self._to_raw(self._loaded[oid])
        self._dirty.clear()

    def discard(self) -> None:
        for oid in self._dirty:
            self._loaded.pop(oid, None)
        self._dirty.clear()

    def release_locks(self) -> None:
        for order_id, lock in self._held_locks.items():
            lock.release()
            logger.debug("Released order %s", order_id)
        self._held_locks.clear()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "created_by": order.created_by,
            "customer": {
                "name": order.customer.name,
                "email": order.customer.email,
                "phone": order.customer.phone,
                "shipping_address": order.customer.shipping_address,
            },
            "order_status": order.order_status.value,
            "payment_status": order.payment_status.value,
            "payment_method": order.payment_method.value,
            "currency": order.subtotal.currency,
            # Derived totals are stored for readers outside the domain;
            # they are recomputed from the line items on load.
            "subtotal": str(order.subtotal.amount),
            "tax_amount": str(order.tax_amount.amount),
            "discount_amount": str(order.discount_amount.amount),
            "total_amount": str(order.total_amount.amount),
            "notes": order.notes,
            "order_date": order.order_date.isoformat(),
            "shipped_date": _iso(order.shipped_date),
            "delivered_date": _iso(order.delivered_date),
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "price": str(item.price.amount),
                    "discount_amount": str(item.discount_amount.amount),
                    "notes": item.notes,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "USD")
        items = [
            OrderLineItem(
                id=i["id"],
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                price=Money(Decimal(i["price"]), currency),
                discount_amount=Money(Decimal(i.get("discount_amount", "0")), currency),
                notes=i.get("notes"),
            )
            for i in raw["items"]
        ]
        customer = raw["customer"]
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            created_by=raw["created_by"],
            customer=CustomerInfo(
                name=customer["name"],
                email=customer.get("email"),
                phone=customer.get("phone"),
                shipping_address=customer.get("shipping_address"),
            ),
            payment_method=PaymentMethod(raw["payment_method"]),
            items=items,
            order_status=OrderStatus(raw["order_status"]),
            payment_status=PaymentStatus(raw["payment_status"]),
            tax_amount=Money(Decimal(raw.get("tax_amount", "0")), currency),
            discount_amount=Money(Decimal(raw.get("discount_amount", "0")), currency),
            notes=raw.get("notes"),
            order_date=datetime.fromisoformat(raw["order_date"]),
            shipped_date=_parse(raw.get("shipped_date")),
            delivered_date=_parse(raw.get("delivered_date")),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
