"""Single JSON document holding every product and order.

Keeping both aggregates in one file lets a commit replace products and
orders together with a single ``os.replace``, so a crash mid-write can
never leave stock changed without the matching order (or vice versa).

Concurrency inside one process:
- ``commit`` re-reads the file under a write lock and merges only the
  records the unit of work changed, so concurrent units of work touching
  different records do not overwrite each other.
- Each product and each order has its own lock, taken by
  ``get_for_update`` and held by the unit of work until it ends.  A record
  is therefore read-modified-written by one unit of work at a time, while
  work on disjoint records proceeds independently.  A unit of work that
  needs both takes the order lock before any product lock.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from ims.domain.exceptions import DuplicateKeyError, ValidationError

logger = logging.getLogger(__name__)

_EMPTY_DOCUMENT = {"products": [], "orders": []}

# Orders in these states never move stock again.
_CLOSED_ORDER_STATUSES = {"DELIVERED", "CANCELLED"}


class JsonDocumentStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._write_lock = threading.Lock()
        self._registry_lock = threading.Lock()
        self._product_locks: dict[str, threading.Lock] = {}
        self._order_locks: dict[int, threading.Lock] = {}
        self._last_order_id = 0
        self._last_product_id = 0
        self._ensure_file()

    @property
    def file_path(self) -> Path:
        return self._file_path

    # --- Reads ----------------------------------------------------------------

    def load(self) -> dict[str, list[dict]]:
        """Return a snapshot of the whole document."""
        return self._read()

    def load_product(self, product_id: str) -> dict | None:
        """Return the latest committed record for one product."""
        return _find(self._read()["products"], product_id)

    def load_order(self, order_id: int) -> dict | None:
        """Return the latest committed record for one order."""
        return _find(self._read()["orders"], order_id)

    # --- Locks ----------------------------------------------------------------

    def product_lock(self, product_id: str) -> threading.Lock:
        return self._lock_for(self._product_locks, product_id)

    def order_lock(self, order_id: int) -> threading.Lock:
        return self._lock_for(self._order_locks, order_id)

    def _lock_for(self, registry: dict, key) -> threading.Lock:
        with self._registry_lock:
            lock = registry.get(key)
            if lock is None:
                lock = registry[key] = threading.Lock()
            return lock

    # --- Identity -------------------------------------------------------------

    def next_order_id(self) -> int:
        with self._write_lock:
            persisted = max((o["id"] for o in self._read()["orders"]), default=0)
            self._last_order_id = max(self._last_order_id, persisted) + 1
            return self._last_order_id

    def next_product_id(self) -> str:
        with self._write_lock:
            persisted = max(
                (int(p["id"]) for p in self._read()["products"] if p["id"].isdigit()),
                default=0,
            )
            self._last_product_id = max(self._last_product_id, persisted) + 1
            return str(self._last_product_id)

    # --- Writes ---------------------------------------------------------------

    def commit(
        self,
        products: list[dict],
        orders: list[dict],
        deleted_products: list[str] | None = None,
    ) -> None:
        """Merge changed records into the document and write it atomically.

        Raises DuplicateKeyError (and writes nothing) if a record would
        take an order number or SKU already owned by another record, and
        ValidationError if a deleted product is still on an open order.
        """
        deleted = set(deleted_products or ())
        if not products and not orders and not deleted:
            return

        with self._write_lock:
            document = self._read()
            document["products"] = [
                raw for raw in document["products"] if raw["id"] not in deleted
            ]
            _check_unique(document["products"], products, "id", "sku", "SKU")
            _check_unique(document["orders"], orders, "id", "order_number", "Order number")
            _upsert(document["products"], products, "id")
            _upsert(document["orders"], orders, "id")
            _check_not_in_open_orders(document["orders"], deleted)
            self._write(document)

        logger.debug(
            "Committed %d product(s), %d order(s) and %d deletion(s) to %s",
            len(products), len(orders), len(deleted), self._file_path,
        )

    # --- File helpers ---------------------------------------------------------

    def _read(self) -> dict[str, list[dict]]:
        document = json.loads(self._file_path.read_text(encoding="utf-8"))
        for key in _EMPTY_DOCUMENT:
            document.setdefault(key, [])
        return document

    def _write(self, document: dict[str, list[dict]]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(document, indent=2) + "\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(
                json.dumps(_EMPTY_DOCUMENT, indent=2) + "\n", encoding="utf-8"
            )


def _find(records: list[dict], record_id) -> dict | None:
    for raw in records:
        if raw["id"] == record_id:
            return raw
    return None


def _check_unique(
    existing: list[dict],
    incoming: list[dict],
    id_key: str,
    unique_key: str,
    label: str,
) -> None:
    owners = {r[unique_key]: r[id_key] for r in existing if r.get(unique_key)}
    for raw in incoming:
        value = raw.get(unique_key)
        if not value:
            continue
        owner = owners.get(value)
        if owner is not None and owner != raw[id_key]:
            raise DuplicateKeyError(f"{label} already exists: {value}")
        owners[value] = raw[id_key]


def _check_not_in_open_orders(orders: list[dict], deleted: set[str]) -> None:
    if not deleted:
        return
    for raw in orders:
        if raw["order_status"] in _CLOSED_ORDER_STATUSES:
            continue
        for item in raw["items"]:
            if item["product_id"] in deleted:
                raise ValidationError(
                    f"Product '{item['product_name']}' is on open order "
                    f"{raw['order_number']} and cannot be deleted"
                )


def _upsert(records: list[dict], incoming: list[dict], id_key: str) -> None:
    index = {r[id_key]: i for i, r in enumerate(records)}
    for raw in incoming:
        position = index.get(raw[id_key])
        if position is None:
            index[raw[id_key]] = len(records)
            records.append(raw)
        else:
            records[position] = raw
