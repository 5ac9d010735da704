"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import click

from ims.application.dto import OrderDTO
from ims.domain.exceptions import DomainException
from ims.infrastructure.config import Settings


def domain_error(exc: DomainException) -> click.ClickException:
    """Translate a domain failure into a CLI error carrying its stable code."""
    return click.ClickException(f"[{exc.code}] {exc}")


def settings_from(ctx: click.Context) -> Settings:
    return ctx.find_object(Settings) or Settings()


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id} {dto.order_number}  (status={dto.order_status}, payment={dto.payment_status})")
    click.echo(f"Customer: {dto.customer_name}")
    for label, value in (
        ("Email", dto.customer_email),
        ("Phone", dto.customer_phone),
        ("Ship to", dto.shipping_address),
    ):
        if value:
            click.echo(f"{label + ':':<9} {value}")
    click.echo(f"Ordered:  {dto.order_date} by {dto.created_by} ({dto.payment_method})")
    if dto.shipped_date:
        click.echo(f"Shipped:  {dto.shipped_date}")
    if dto.delivered_date:
        click.echo(f"Delivered: {dto.delivered_date}")
    click.echo()

    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Discount':>10} {'Total':>10}")
    click.echo(f"  {'-'*58}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.price:>10} "
            f"{item.discount_amount:>10} {item.total_amount:>10}"
        )
    click.echo(f"  {'-'*58}")
    click.echo(f"  {'Subtotal':<27} {dto.subtotal:>31}")
    click.echo(f"  {'Tax':<27} {dto.tax_amount:>31}")
    click.echo(f"  {'Discount':<27} {dto.discount_amount:>31}")
    click.echo(f"  {'Order Total':<27} {dto.total_amount:>31}")

    if dto.notes:
        click.echo()
        click.echo("Notes:")
        for line in dto.notes.splitlines():
            click.echo(f"  {line}")
