"""Unit tests for the CatalogStore domain service."""

import logging

import pytest

from ims.domain.exceptions import EntityNotFoundError, InsufficientStockError, ValidationError
from ims.domain.service.catalog_store import CatalogStore
from tests.builders import make_product
from tests.fakes import FakeProductRepository


def _catalog(*products):
    repo = FakeProductRepository(list(products))
    return CatalogStore(repo), repo


class TestGetForOrder:

    def test_returns_active_product(self):
        catalog, _ = _catalog(make_product("1"))
        assert catalog.get_for_order("1").id == "1"

    def test_unknown_product(self):
        catalog, _ = _catalog()
        with pytest.raises(EntityNotFoundError, match="'99' not found"):
            catalog.get_for_order("99")

    def test_inactive_product(self):
        catalog, _ = _catalog(make_product("1", is_active=False))
        with pytest.raises(ValidationError, match="not active"):
            catalog.get_for_order("1")

    def test_lock_for_order_takes_lock(self):
        catalog, repo = _catalog(make_product("1"))
        catalog.lock_for_order("1")
        assert repo.locked == ["1"]


class TestAdjustStock:

    def test_decrement_persists(self):
        catalog, repo = _catalog(make_product("1", stock=10))
        catalog.adjust_stock("1", -3)
        assert repo.get_by_id("1").stock_quantity == 7

    def test_increment(self):
        catalog, repo = _catalog(make_product("1", stock=7))
        catalog.adjust_stock("1", 3)
        assert repo.get_by_id("1").stock_quantity == 10

    def test_overdraw_leaves_stock(self):
        catalog, repo = _catalog(make_product("1", stock=2))
        with pytest.raises(InsufficientStockError):
            catalog.adjust_stock("1", -5)
        assert repo.get_by_id("1").stock_quantity == 2

    def test_unknown_product(self):
        catalog, _ = _catalog()
        with pytest.raises(EntityNotFoundError):
            catalog.adjust_stock("1", 1)

    def test_low_stock_warning_logged(self, caplog):
        catalog, _ = _catalog(make_product("1", stock=5, min_stock=3))
        with caplog.at_level(logging.WARNING, logger="ims.domain.service.catalog_store"):
            catalog.adjust_stock("1", -3)
        assert "low on stock" in caplog.text
