"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ims.domain.model.order import Order
from ims.domain.model.product import Product

_DATE_FORMAT = "%Y-%m-%d %H:%M UTC"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLineRequest:
    """Input: one requested line (product, quantity, agreed price)."""

    product_id: str
    quantity: int
    price: str | Decimal
    discount_amount: str | Decimal = "0"
    notes: str | None = None


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    id: int
    product_id: str
    product_name: str
    quantity: int
    price: str  # formatted, e.g. "$15.00"
    discount_amount: str
    subtotal: str
    total_amount: str
    discount_percentage: Decimal
    notes: str | None


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    created_by: str
    customer_name: str
    customer_email: str | None
    customer_phone: str | None
    shipping_address: str | None
    order_status: str
    payment_status: str
    payment_method: str
    items: list[OrderLineItemDTO]
    subtotal: str
    tax_amount: str
    discount_amount: str
    total_amount: str
    notes: str | None
    order_date: str
    shipped_date: str | None
    delivered_date: str | None
    is_completed: bool


@dataclass(frozen=True)
class ProductDTO:
    """Output: a catalog entry with its stock position."""

    id: str
    name: str
    sku: str | None
    price: str
    cost_price: str
    stock_quantity: int
    min_stock_level: int
    max_stock_level: int
    is_active: bool
    is_low_stock: bool
    is_out_of_stock: bool
    is_overstocked: bool
    profit_margin: Decimal
    category_id: str | None = None
    brand: str | None = None
    supplier: str | None = None
    unit: str | None = None
    description: str | None = None


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------


def _fmt_date(value: datetime | None) -> str | None:
    return value.strftime(_DATE_FORMAT) if value is not None else None


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        created_by=order.created_by,
        customer_name=order.customer.name,
        customer_email=order.customer.email,
        customer_phone=order.customer.phone,
        shipping_address=order.customer.shipping_address,
        order_status=order.order_status.value,
        payment_status=order.payment_status.value,
        payment_method=order.payment_method.value,
        items=[
            OrderLineItemDTO(
                id=item.id,  # type: ignore[arg-type]
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                price=str(item.price),
                discount_amount=str(item.discount_amount),
                subtotal=str(item.subtotal),
                total_amount=str(item.total_amount),
                discount_percentage=item.discount_percentage,
                notes=item.notes,
            )
            for item in order.items
        ],
        subtotal=str(order.subtotal),
        tax_amount=str(order.tax_amount),
        discount_amount=str(order.discount_amount),
        total_amount=str(order.total_amount),
        notes=order.notes,
        order_date=_fmt_date(order.order_date),  # type: ignore[arg-type]
        shipped_date=_fmt_date(order.shipped_date),
        delivered_date=_fmt_date(order.delivered_date),
        is_completed=order.is_completed,
    )


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        name=product.name,
        sku=product.sku,
        price=str(product.price),
        cost_price=str(product.cost_price),
        stock_quantity=product.stock_quantity,
        min_stock_level=product.min_stock_level,
        max_stock_level=product.max_stock_level,
        is_active=product.is_active,
        is_low_stock=product.is_low_stock,
        is_out_of_stock=product.is_out_of_stock,
        is_overstocked=product.is_overstocked,
        profit_margin=product.profit_margin,
        category_id=product.category_id,
        brand=product.brand,
        supplier=product.supplier,
        unit=product.unit,
        description=product.description,
    )
