"""Abstract unit of work.

Groups product and order changes into one atomic commit. Handlers use it
as a context manager; leaving the block without calling ``commit()``
discards every staged change::

    with uow:
        ...
        uow.commit()
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ims.domain.repository.order_repository import OrderRepository
from ims.domain.repository.product_repository import ProductRepository


class UnitOfWork(ABC):

    products: ProductRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every staged change durable at once."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged changes and release any held locks."""
