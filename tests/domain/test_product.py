"""Unit tests for the Product aggregate."""

from decimal import Decimal

import pytest

from ims.domain.exceptions import InsufficientStockError, ValidationError
from ims.domain.model.product import Product
from ims.domain.model.value_objects import Money
from tests.builders import make_product


class TestProductCreate:

    def test_happy_path(self):
        p = Product.create(
            id="1", name="  Widget ", price=Money.of("15"), cost_price=Money.of("10"),
            stock_quantity=5, sku="W-1", brand="Acme",
        )
        assert p.name == "Widget"
        assert p.sku == "W-1"
        assert p.brand == "Acme"
        assert p.is_active
        assert p.max_stock_level == 1000

    def test_short_name_rejected(self):
        with pytest.raises(ValidationError, match="at least 2 characters"):
            Product.create(id="1", name="W", price=Money.of("1"), cost_price=Money.of("1"))

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            Product.create(id="1", name="Widget", price=Money.zero(), cost_price=Money.of("1"))

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Product.create(
                id="1", name="Widget", price=Money.of("1"), cost_price=Money.of("1"),
                stock_quantity=-1,
            )

    def test_min_above_max_rejected(self):
        with pytest.raises(ValidationError, match="Minimum stock level"):
            Product.create(
                id="1", name="Widget", price=Money.of("1"), cost_price=Money.of("1"),
                min_stock_level=10, max_stock_level=5,
            )


class TestProductStockFlags:

    def test_low_stock_at_threshold(self):
        assert make_product(stock=2, min_stock=2).is_low_stock

    def test_not_low_above_threshold(self):
        assert not make_product(stock=3, min_stock=2).is_low_stock

    def test_out_of_stock(self):
        assert make_product(stock=0).is_out_of_stock

    def test_overstocked_at_max(self):
        assert make_product(stock=100, max_stock=100).is_overstocked

    def test_profit(self):
        p = make_product(price="12.50", cost_price="10.00")
        assert p.profit_amount == Decimal("2.50")
        assert p.profit_margin == Decimal("0.2500")

    def test_profit_margin_zero_cost(self):
        assert make_product(cost_price="0").profit_margin == Decimal("0")


class TestAdjustStock:

    def test_consume(self):
        p = make_product(stock=10)
        p.adjust_stock(-3)
        assert p.stock_quantity == 7

    def test_restore(self):
        p = make_product(stock=7)
        p.adjust_stock(3)
        assert p.stock_quantity == 10

    def test_consume_everything(self):
        p = make_product(stock=4)
        p.adjust_stock(-4)
        assert p.stock_quantity == 0

    def test_overdraw_rejected_and_unchanged(self):
        p = make_product(name="Widget", stock=2)
        with pytest.raises(InsufficientStockError) as exc_info:
            p.adjust_stock(-3)
        assert p.stock_quantity == 2
        assert exc_info.value.requested == 3
        assert exc_info.value.available == 2
        assert "Insufficient stock for Widget" in str(exc_info.value)

    def test_zero_delta_rejected(self):
        with pytest.raises(ValidationError, match="non-zero"):
            make_product().adjust_stock(0)

    def test_inactive_product_cannot_be_consumed(self):
        p = make_product(is_active=False)
        with pytest.raises(ValidationError, match="not active"):
            p.adjust_stock(-1)

    def test_inactive_product_can_be_restored(self):
        p = make_product(stock=1, is_active=False)
        p.adjust_stock(2)
        assert p.stock_quantity == 3


class TestProductUpdates:

    def test_update_price(self):
        p = make_product()
        p.update_price(Money.of("20"))
        assert p.price == Money.of("20")

    def test_update_price_zero_rejected(self):
        with pytest.raises(ValidationError):
            make_product().update_price(Money.zero())

    def test_update_stock_levels_partial(self):
        p = make_product(min_stock=2, max_stock=100)
        p.update_stock_levels(max_stock_level=50)
        assert (p.min_stock_level, p.max_stock_level) == (2, 50)

    def test_update_stock_levels_invalid(self):
        with pytest.raises(ValidationError):
            make_product(min_stock=2, max_stock=100).update_stock_levels(max_stock_level=1)

    def test_set_stock_negative_rejected(self):
        with pytest.raises(ValidationError):
            make_product().set_stock(-1)

    def test_deactivate(self):
        p = make_product()
        p.set_active(False)
        assert not p.is_active
