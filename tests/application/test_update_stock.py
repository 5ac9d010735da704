"""Tests for manual stock corrections."""

import pytest

from ims.application.update_stock import StockOperation, UpdateStockHandler
from ims.domain.exceptions import EntityNotFoundError, InsufficientStockError, ValidationError
from tests.builders import make_product
from tests.fakes import FakeUnitOfWork


def _setup(**product_kwargs):
    uow = FakeUnitOfWork([make_product("1", stock=10, **product_kwargs)])
    return UpdateStockHandler(uow), uow


class TestUpdateStock:

    def test_add(self):
        handler, uow = _setup()
        dto = handler.handle("1", StockOperation.ADD, 5, notes="Delivery")
        assert dto.stock_quantity == 15
        assert uow.products.get_by_id("1").stock_quantity == 15

    def test_subtract(self):
        handler, _ = _setup()
        assert handler.handle("1", StockOperation.SUBTRACT, 4).stock_quantity == 6

    def test_subtract_too_much(self):
        handler, uow = _setup()
        with pytest.raises(InsufficientStockError):
            handler.handle("1", StockOperation.SUBTRACT, 11)
        assert uow.products.get_by_id("1").stock_quantity == 10

    def test_set(self):
        handler, _ = _setup()
        assert handler.handle("1", StockOperation.SET, 3).stock_quantity == 3

    def test_non_positive_quantity(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="greater than 0"):
            handler.handle("1", StockOperation.ADD, 0)

    def test_subtract_from_inactive_rejected(self):
        handler, _ = _setup(is_active=False)
        with pytest.raises(ValidationError, match="not active"):
            handler.handle("1", StockOperation.SUBTRACT, 1)

    def test_unknown_product(self):
        handler, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle("2", StockOperation.SET, 1)
