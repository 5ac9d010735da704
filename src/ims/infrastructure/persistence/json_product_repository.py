"""JSON-document-backed implementation of ProductRepository.

Lives inside a JsonUnitOfWork: reads come from the unit of work's
snapshot, writes are staged until the unit of work commits.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from decimal import Decimal

from ims.domain.model.product import Product
from ims.domain.model.value_objects import Money
from ims.domain.repository.product_repository import ProductRepository
from ims.infrastructure.persistence.json_store import JsonDocumentStore

logger = logging.getLogger(__name__)


class JsonProductRepository(ProductRepository):

    def __init__(self, store: JsonDocumentStore, records: list[dict]) -> None:
        self._store = store
        self._records = {raw["id"]: raw for raw in records}
        self._loaded: dict[str, Product] = {}
        self._dirty: set[str] = set()
        self._held_locks: dict[str, threading.Lock] = {}
        self._deleted: dict[str, dict | None] = {}

    # --- ProductRepository interface ------------------------------------------

    def next_id(self) -> str:
        return self._store.next_product_id()

    def get_by_id(self, product_id: str) -> Product | None:
        if product_id in self._loaded:
            return self._loaded[product_id]
        raw = self._records.get(product_id)
        if raw is None:
            return None
        product = self._loaded[product_id] = self._to_domain(raw)
        return product

    def get_for_update(self, product_id: str) -> Product | None:
        if product_id in self._held_locks:
            return self.get_by_id(product_id)

        lock = self._store.product_lock(product_id)
        lock.acquire()
        self._held_locks[product_id] = lock
        logger.debug("Locked product %s", product_id)

        # The snapshot may be stale; re-read now that we hold the lock.
        raw = self._store.load_product(product_id)
        if raw is None:
            return None
        self._records[product_id] = raw
        product = self._loaded[product_id] = self._to_domain(raw)
        return product

    def get_by_sku(self, sku: str) -> Product | None:
        for product in self.list_all():
            if product.sku is not None and product.sku.lower() == sku.lower():
                return product
        return None

    def list_all(self) -> list[Product]:
        ids = list(self._records) + [pid for pid in self._loaded if pid not in self._records]
        return [self.get_by_id(pid) for pid in ids]  # type: ignore[misc]

    def save(self, product: Product) -> None:
        self._loaded[product.id] = product
        self._dirty.add(product.id)

    def delete(self, product_id: str) -> None:
        self._deleted[product_id] = self._records.pop(product_id, None)
        self._loaded.pop(product_id, None)
        self._dirty.discard(product_id)

    # --- Unit of work hooks ---------------------------------------------------

    def staged_records(self) -> list[dict]:
        return [self._to_raw(self._loaded[pid]) for pid in sorted(self._dirty)]

    def staged_deletions(self) -> list[str]:
        return sorted(self._deleted)

    def mark_clean(self) -> None:
        for pid in self._dirty:
            self._records[pid] = self._to_raw(self._loaded[pid])
        self._dirty.clear()
        self._deleted.clear()

    def discard(self) -> None:
        for pid in self._dirty:
            self._loaded.pop(pid, None)
        self._dirty.clear()
        for pid, raw in self._deleted.items():
            if raw is not None:
                self._records[pid] = raw
        self._deleted.clear()

    def release_locks(self) -> None:
        for product_id, lock in self._held_locks.items():
            lock.release()
            logger.debug("Released product %s", product_id)
        self._held_locks.clear()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "sku": product.sku,
            "description": product.description,
            "price": str(product.price.amount),
            "cost_price": str(product.cost_price.amount),
            "currency": product.price.currency,
            "stock_quantity": product.stock_quantity,
            "min_stock_level": product.min_stock_level,
            "max_stock_level": product.max_stock_level,
            "unit": product.unit,
            "brand": product.brand,
            "supplier": product.supplier,
            "category_id": product.category_id,
            "is_active": product.is_active,
            "created_at": product.created_at.isoformat(),
            "updated_at": product.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency", "USD")
        return Product(
            id=raw["id"],
            name=raw["name"],
            sku=raw.get("sku"),
            description=raw.get("description"),
            price=Money(Decimal(raw["price"]), currency),
            cost_price=Money(Decimal(raw["cost_price"]), currency),
            stock_quantity=raw["stock_quantity"],
            min_stock_level=raw.get("min_stock_level", 0),
            max_stock_level=raw.get("max_stock_level", 1000),
            unit=raw.get("unit"),
            brand=raw.get("brand"),
            supplier=raw.get("supplier"),
            category_id=raw.get("category_id"),
            is_active=raw.get("is_active", True),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
