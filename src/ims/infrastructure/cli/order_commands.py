"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime, time, timezone

import click

from ims.application.cancel_order import DEFAULT_CANCEL_REASON, CancelOrderHandler
from ims.application.create_order import CreateOrderHandler
from ims.application.dto import OrderLineRequest
from ims.application.list_orders import ListOrdersHandler
from ims.application.show_order import ShowOrderHandler
from ims.application.update_order_status import UpdateOrderStatusHandler
from ims.domain.exceptions import DomainException
from ims.domain.model.order import CustomerInfo, OrderStatus, PaymentMethod, PaymentStatus
from ims.infrastructure.bootstrap import current_user, unit_of_work
from ims.infrastructure.cli.common import display_order, domain_error, settings_from

_ORDER_STATUSES = click.Choice([s.value for s in OrderStatus], case_sensitive=False)
_PAYMENT_STATUSES = click.Choice([s.value for s in PaymentStatus], case_sensitive=False)
_PAYMENT_METHODS = click.Choice([m.value for m in PaymentMethod], case_sensitive=False)


def _parse_items(raw: str) -> list[OrderLineRequest]:
    """Parse '1:3@9.99,2:1@25.00:2.50' into OrderLineRequest list.

    Each entry is PRODUCT_ID:QTY@PRICE with an optional :DISCOUNT.
    """
    lines: list[OrderLineRequest] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if ":" not in entry or "@" not in entry:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductId:Qty@Price[:Discount]'."
            )
        head, pricing = entry.split("@", 1)
        if ":" not in head:
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductId:Qty@Price[:Discount]'."
            )
        product_id, qty_str = head.rsplit(":", 1)
        price, _, discount = pricing.partition(":")
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        lines.append(
            OrderLineRequest(
                product_id=product_id.strip(),
                quantity=qty,
                price=price.strip(),
                discount_amount=discount.strip() or "0",
            )
        )
    return lines


@click.command("create")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--email", default=None, help="Customer email.")
@click.option("--phone", default=None, help="Customer phone.")
@click.option("--address", default=None, help="Shipping address.")
@click.option("--payment-method", required=True, type=_PAYMENT_METHODS, help="How the customer pays.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty@Price[:Discount],...'.")
@click.option("--tax", default=None, help="Tax amount for the whole order.")
@click.option("--discount", default=None, help="Discount amount for the whole order.")
@click.option("--notes", default=None, help="Free-form order notes.")
@click.pass_context
def order_create(
    ctx: click.Context,
    customer: str,
    email: str | None,
    phone: str | None,
    address: str | None,
    payment_method: str,
    items: str,
    tax: str | None,
    discount: str | None,
    notes: str | None,
) -> None:
    """Place a new order (consumes stock)."""
    lines = _parse_items(items)
    settings = settings_from(ctx)

    try:
        user = current_user(settings)
        handler = CreateOrderHandler(uow=unit_of_work(settings), currency=settings.currency)
        dto = handler.handle(
            user=user,
            customer=CustomerInfo(
                name=customer, email=email, phone=phone, shipping_address=address
            ),
            payment_method=PaymentMethod(payment_method.upper()),
            lines=lines,
            notes=notes,
            tax_amount=tax,
            discount_amount=discount,
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Order #{dto.id} {dto.order_number} created  (status={dto.order_status})")
    click.echo()
    display_order(dto)


@click.command("show")
@click.option("--id", "order_id", type=int, default=None, help="Order ID to display.")
@click.option("--number", "order_number", default=None, help="Order number to display.")
@click.pass_context
def order_show(ctx: click.Context, order_id: int | None, order_number: str | None) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(uow=unit_of_work(settings_from(ctx)))

    try:
        dto = handler.handle(order_id=order_id, order_number=order_number)
    except DomainException as exc:
        raise domain_error(exc)

    display_order(dto)


@click.command("list")
@click.option("--status", "order_status", type=_ORDER_STATUSES, default=None, help="Only this order status.")
@click.option("--payment", "payment_status", type=_PAYMENT_STATUSES, default=None, help="Only this payment status.")
@click.option("--search", default=None, help="Match order number or customer name/email/phone.")
@click.option("--from", "start", type=click.DateTime(["%Y-%m-%d"]), default=None, help="First order date (inclusive).")
@click.option("--to", "end", type=click.DateTime(["%Y-%m-%d"]), default=None, help="Last order date (inclusive).")
@click.option("--limit", type=int, default=None, help="Show at most this many orders.")
@click.pass_context
def order_list(
    ctx: click.Context,
    order_status: str | None,
    payment_status: str | None,
    search: str | None,
    start: datetime | None,
    end: datetime | None,
    limit: int | None,
) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(uow=unit_of_work(settings_from(ctx)))

    try:
        orders = handler.handle(
            order_status=OrderStatus(order_status.upper()) if order_status else None,
            payment_status=PaymentStatus(payment_status.upper()) if payment_status else None,
            search=search,
            start=start.replace(tzinfo=timezone.utc) if start else None,
            end=datetime.combine(end.date(), time.max, tzinfo=timezone.utc) if end else None,
            limit=limit,
        )
    except DomainException as exc:
        raise domain_error(exc)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Number':<28} {'Customer':<20} {'Status':<11} {'Payment':<9} {'Total':>10}")
    click.echo("-" * 89)
    for dto in orders:
        click.echo(
            f"{dto.id:<6} {dto.order_number:<28} {dto.customer_name:<20} "
            f"{dto.order_status:<11} {dto.payment_status:<9} {dto.total_amount:>10}"
        )


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--status", "order_status", type=_ORDER_STATUSES, default=None, help="New order status.")
@click.option("--payment", "payment_status", type=_PAYMENT_STATUSES, default=None, help="New payment status.")
@click.option("--notes", default=None, help="Note to append to the order.")
@click.pass_context
def order_status(
    ctx: click.Context,
    order_id: int,
    order_status: str | None,
    payment_status: str | None,
    notes: str | None,
) -> None:
    """Move an order along its lifecycle or record a payment change."""
    handler = UpdateOrderStatusHandler(uow=unit_of_work(settings_from(ctx)))

    try:
        dto = handler.handle(
            order_id,
            order_status=OrderStatus(order_status.upper()) if order_status else None,
            payment_status=PaymentStatus(payment_status.upper()) if payment_status else None,
            notes=notes,
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(
        f"Order #{order_id} is now {dto.order_status} (payment {dto.payment_status})."
    )


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.option("--reason", default=DEFAULT_CANCEL_REASON, show_default=True, help="Why the order is cancelled.")
@click.pass_context
def order_cancel(ctx: click.Context, order_id: int, reason: str) -> None:
    """Cancel an order (returns its items to stock)."""
    handler = CancelOrderHandler(uow=unit_of_work(settings_from(ctx)))

    try:
        handler.handle(order_id, reason=reason)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Order #{order_id} cancelled, stock restored.")
