"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, products are activated and deactivated, and stock moves
up and down as orders are placed and cancelled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from ims.domain.exceptions import InsufficientStockError, ValidationError
from ims.domain.model.value_objects import Money

DEFAULT_MAX_STOCK_LEVEL = 1000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Product:
    """A product in the catalog, including its stock on hand.

    Invariants:
    - ``stock_quantity`` is never negative
    - ``0 <= min_stock_level <= max_stock_level`` and ``max_stock_level >= 1``
      (checked when levels are set, not on every stock movement)
    """

    id: str
    name: str
    price: Money
    cost_price: Money
    stock_quantity: int = 0
    min_stock_level: int = 0
    max_stock_level: int = DEFAULT_MAX_STOCK_LEVEL
    sku: str | None = None
    description: str | None = None
    unit: str | None = None
    brand: str | None = None
    supplier: str | None = None
    category_id: str | None = None
    is_active: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(
        id: str,
        name: str,
        price: Money,
        cost_price: Money,
        stock_quantity: int = 0,
        min_stock_level: int = 0,
        max_stock_level: int = DEFAULT_MAX_STOCK_LEVEL,
        **details: str | None,
    ) -> Product:
        """Create a new product, enforcing all invariants."""
        if not name or len(name.strip()) < 2:
            raise ValidationError("Product name must be at least 2 characters")
        if price.is_zero:
            raise ValidationError("Product price must be greater than zero")
        if stock_quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        _check_stock_levels(min_stock_level, max_stock_level)

        return Product(
            id=id,
            name=name.strip(),
            price=price,
            cost_price=cost_price,
            stock_quantity=stock_quantity,
            min_stock_level=min_stock_level,
            max_stock_level=max_stock_level,
            **details,
        )

    # --- Derived predicates ---------------------------------------------------

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.min_stock_level

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock_quantity <= 0

    @property
    def is_overstocked(self) -> bool:
        return self.stock_quantity >= self.max_stock_level

    @property
    def profit_amount(self) -> Decimal:
        return self.price.amount - self.cost_price.amount

    @property
    def profit_margin(self) -> Decimal:
        """Profit relative to cost, e.g. ``0.2500`` for a 25% markup."""
        if self.cost_price.is_zero:
            return Decimal("0")
        return (self.profit_amount / self.cost_price.amount).quantize(Decimal("0.0001"))

    # --- Mutations ------------------------------------------------------------

    def adjust_stock(self, delta: int) -> None:
        """Apply a signed stock movement.

        Negative deltas consume stock and require an active product.
        The new quantity is checked before anything changes, so a rejected
        movement leaves the product untouched.
        """
        if delta == 0:
            raise ValidationError("Stock adjustment must be non-zero")
        if delta < 0 and not self.is_active:
            raise ValidationError(f"Product '{self.name}' is not active")
        new_quantity = self.stock_quantity + delta
        if new_quantity < 0:
            raise InsufficientStockError(self.name, -delta, self.stock_quantity)
        self.stock_quantity = new_quantity
        self._touch()

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        self.stock_quantity = quantity
        self._touch()

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.is_zero:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price
        self._touch()

    def update_cost_price(self, new_cost: Money) -> None:
        self.cost_price = new_cost
        self._touch()

    def update_stock_levels(
        self,
        min_stock_level: int | None = None,
        max_stock_level: int | None = None,
    ) -> None:
        new_min = self.min_stock_level if min_stock_level is None else min_stock_level
        new_max = self.max_stock_level if max_stock_level is None else max_stock_level
        _check_stock_levels(new_min, new_max)
        self.min_stock_level = new_min
        self.max_stock_level = new_max
        self._touch()

    def set_active(self, active: bool) -> None:
        self.is_active = active
        self._touch()

    def _touch(self) -> None:
        self.updated_at = _utcnow()


def _check_stock_levels(min_stock_level: int, max_stock_level: int) -> None:
    if min_stock_level < 0:
        raise ValidationError("Minimum stock level cannot be negative")
    if max_stock_level < 1:
        raise ValidationError("Maximum stock level must be greater than 0")
    if min_stock_level > max_stock_level:
        raise ValidationError(
            "Minimum stock level cannot be greater than maximum stock level"
        )
