"""JSON-document-backed implementation of UnitOfWork."""

from __future__ import annotations

from ims.domain.repository.unit_of_work import UnitOfWork
from ims.infrastructure.persistence.json_order_repository import JsonOrderRepository
from ims.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from ims.infrastructure.persistence.json_store import JsonDocumentStore


class JsonUnitOfWork(UnitOfWork):
    """Stages product and order changes and commits them in one write.

    Each ``with`` block starts from a fresh snapshot.  Locks taken through
    ``products.get_for_update`` and ``orders.get_for_update`` are released
    when the block ends, after the commit (if any) has been written.
    """

    products: JsonProductRepository
    orders: JsonOrderRepository

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store

    def __enter__(self) -> JsonUnitOfWork:
        snapshot = self._store.load()
        self.products = JsonProductRepository(self._store, snapshot["products"])
        self.orders = JsonOrderRepository(self._store, snapshot["orders"])
        return self

    def commit(self) -> None:
        self._store.commit(
            products=self.products.staged_records(),
            orders=self.orders.staged_records(),
            deleted_products=self.products.staged_deletions(),
        )
        self.products.mark_clean()
        self.orders.mark_clean()

    def rollback(self) -> None:
        self.products.discard()
        self.orders.discard()
        self.products.release_locks()
        self.orders.release_locks()
