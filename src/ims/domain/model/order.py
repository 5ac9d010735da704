"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items.
Monetary totals and status transitions are enforced here; stock
movements are coordinated by the application handlers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from ims.domain.exceptions import (
    AlreadyCancelledError,
    CannotCancelDeliveredError,
    InvalidStateTransitionError,
    ValidationError,
)
from ims.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class PaymentMethod(Enum):
    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    DIGITAL_WALLET = "DIGITAL_WALLET"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


# Forward moves only; CANCELLED is reached through ``Order.cancel``.
_NEXT_STATUS: dict[OrderStatus, OrderStatus] = {
    OrderStatus.PENDING: OrderStatus.CONFIRMED,
    OrderStatus.CONFIRMED: OrderStatus.PROCESSING,
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Customer contact details
# ---------------------------------------------------------------------------
_CUSTOMER_FIELD_LIMITS = {
    "name": 200,
    "email": 500,
    "phone": 15,
    "shipping_address": 500,
}


@dataclass(frozen=True)
class CustomerInfo:

    name: str
    email: str | None = None
    phone: str | None = None
    shipping_address: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Customer name is required")
        for field_name, limit in _CUSTOMER_FIELD_LIMITS.items():
            value = getattr(self, field_name)
            if value is not None and len(value) > limit:
                raise ValidationError(
                    f"Customer {field_name.replace('_', ' ')} must not exceed "
                    f"{limit} characters"
                )
        if self.email and "@" not in self.email:
            raise ValidationError(f"Invalid customer email: {self.email!r}")


@dataclass
class OrderLineItem:
    """Captures the price of a product at order-creation time.

    The ``price`` is supplied by the caller when the order is placed and
    never changes afterwards, regardless of later catalog price changes.
    """

    product_id: str
    product_name: str
    quantity: Quantity
    price: Money  # locked at order-creation time
    discount_amount: Money | None = None
    notes: str | None = None
    id: int | None = None

    def __post_init__(self) -> None:
        if self.price.is_zero:
            raise ValidationError(
                f"Price for {self.product_name} must be greater than zero"
            )
        if self.discount_amount is None:
            self.discount_amount = Money.zero(self.price.currency)
        if self.discount_amount > self.subtotal:
            raise ValidationError(
                f"Discount {self.discount_amount} exceeds line subtotal "
                f"{self.subtotal} for {self.product_name}"
            )

    @property
    def subtotal(self) -> Money:
        return self.price * self.quantity.value

    @property
    def total_amount(self) -> Money:
        return self.subtotal - self.discount_amount

    @property
    def has_discount(self) -> bool:
        return not self.discount_amount.is_zero

    @property
    def discount_percentage(self) -> Decimal:
        if not self.has_discount:
            return Decimal("0")
        return self.discount_amount.ratio_to(self.subtotal) * 100


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` stays simple so the repository can
    reconstitute persisted orders without re-validating.

    Invariants:
    - ``subtotal == sum(line.price * line.quantity)``
    - ``total_amount == subtotal + tax_amount - discount_amount``
    """

    id: int | None
    order_number: str
    created_by: str
    customer: CustomerInfo
    payment_method: PaymentMethod
    items: list[OrderLineItem] = field(default_factory=list)
    order_status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    tax_amount: Money = field(default_factory=Money.zero)
    discount_amount: Money = field(default_factory=Money.zero)
    notes: str | None = None
    order_date: datetime = field(default_factory=_utcnow)
    shipped_date: datetime | None = None
    delivered_date: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    subtotal: Money = field(init=False)
    total_amount: Money = field(init=False)

    def __post_init__(self) -> None:
        self._recalculate_totals()

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        created_by: str,
        customer: CustomerInfo,
        payment_method: PaymentMethod,
        items: list[OrderLineItem],
        tax_amount: Money | None = None,
        discount_amount: Money | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Order:
        """Create a new PENDING order, enforcing all invariants."""
        if not items:
            raise ValidationError("Order must contain at least one item")

        for position, item in enumerate(items, start=1):
            if item.id is None:
                item.id = position

        currency = items[0].price.currency
        now = now or _utcnow()
        return Order(
            id=None,
            order_number=order_number,
            created_by=created_by,
            customer=customer,
            payment_method=payment_method,
            items=list(items),
            tax_amount=tax_amount or Money.zero(currency),
            discount_amount=discount_amount or Money.zero(currency),
            notes=notes,
            order_date=now,
            created_at=now,
            updated_at=now,
        )

    # --- Line items -----------------------------------------------------------

    def add_line_item(self, item: OrderLineItem) -> None:
        if item.id is None:
            item.id = max((i.id or 0 for i in self.items), default=0) + 1
        self.items.append(item)
        self._recalculate_totals()

    def remove_line_item(self, item: OrderLineItem) -> None:
        try:
            self.items.remove(item)
        except ValueError:
            raise ValidationError(
                f"Line item for {item.product_name} is not part of this order"
            ) from None
        self._recalculate_totals()

    # --- State transitions ----------------------------------------------------

    def transition_to(self, new_status: OrderStatus, now: datetime | None = None) -> None:
        """Move the order along PENDING -> CONFIRMED -> PROCESSING -> SHIPPED -> DELIVERED.

        Re-applying the current status is accepted and changes nothing, so
        ``shipped_date`` and ``delivered_date`` are stamped only once.
        """
        if new_status == OrderStatus.CANCELLED and not self.is_cancelled:
            raise InvalidStateTransitionError(
                f"Order {self.order_number} must be cancelled through the cancel operation"
            )
        if new_status != self.order_status:
            allowed = _NEXT_STATUS.get(self.order_status)
            if allowed != new_status:
                hint = (
                    f"next allowed status is {allowed.value}"
                    if allowed is not None
                    else f"{self.order_status.value} is final"
                )
                raise InvalidStateTransitionError(
                    f"Cannot move order {self.order_number} from "
                    f"{self.order_status.value} to {new_status.value}; {hint}"
                )
            self.order_status = new_status

        now = now or _utcnow()
        if new_status == OrderStatus.SHIPPED and self.shipped_date is None:
            self.shipped_date = now
        elif new_status == OrderStatus.DELIVERED and self.delivered_date is None:
            self.delivered_date = now
        self.updated_at = now

    def update_payment_status(self, new_status: PaymentStatus) -> None:
        self.payment_status = new_status
        self.updated_at = _utcnow()

    def ensure_cancellable(self) -> None:
        if self.order_status == OrderStatus.CANCELLED:
            raise AlreadyCancelledError(f"Order {self.order_number} is already cancelled")
        if self.order_status == OrderStatus.DELIVERED:
            raise CannotCancelDeliveredError(
                f"Cannot cancel delivered order {self.order_number}"
            )

    def cancel(self, reason: str | None = None) -> None:
        """Transition any non-terminal status -> CANCELLED.

        Stock restoration must happen *before* calling this (coordinated
        by the cancel handler in the same unit of work).
        """
        self.ensure_cancellable()
        self.order_status = OrderStatus.CANCELLED
        if reason and reason.strip():
            self.append_note(f"Cancellation reason: {reason.strip()}")
        self.updated_at = _utcnow()

    def append_note(self, note: str) -> None:
        if not note or not note.strip():
            return
        self.notes = f"{self.notes}\n{note}" if self.notes else note
        self.updated_at = _utcnow()

    # --- Computed properties --------------------------------------------------

    @property
    def is_completed(self) -> bool:
        return (
            self.order_status == OrderStatus.DELIVERED
            and self.payment_status == PaymentStatus.PAID
        )

    @property
    def is_cancelled(self) -> bool:
        return self.order_status == OrderStatus.CANCELLED

    def quantities_by_product(self) -> dict[str, int]:
        """Total ordered quantity per product across all line items."""
        totals: dict[str, int] = {}
        for item in self.items:
            totals[item.product_id] = totals.get(item.product_id, 0) + item.quantity.value
        return totals

    # --- Internal helpers -----------------------------------------------------

    def _recalculate_totals(self) -> None:
        subtotal = Money.zero(self.tax_amount.currency)
        for item in self.items:
            subtotal = subtotal + item.subtotal
        self.subtotal = subtotal
        self.total_amount = subtotal + self.tax_amount - self.discount_amount
