"""CLI commands for stock levels."""

from __future__ import annotations

import click

from ims.application.show_inventory import ShowInventoryHandler, StockFilter
from ims.application.update_stock import StockOperation, UpdateStockHandler
from ims.domain.exceptions import DomainException
from ims.infrastructure.bootstrap import unit_of_work
from ims.infrastructure.cli.common import domain_error, settings_from


@click.command("adjust")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--operation", required=True,
              type=click.Choice([op.value for op in StockOperation], case_sensitive=False),
              help="ADD to, SUBTRACT from, or SET the stock.")
@click.option("--quantity", required=True, type=int, help="Quantity to apply.")
@click.option("--notes", default=None, help="Reason for the correction.")
@click.pass_context
def inventory_adjust(
    ctx: click.Context,
    product_id: str,
    operation: str,
    quantity: int,
    notes: str | None,
) -> None:
    """Correct the stock of a product."""
    handler = UpdateStockHandler(uow=unit_of_work(settings_from(ctx)))

    try:
        dto = handler.handle(
            product_id=product_id,
            operation=StockOperation(operation.upper()),
            quantity=quantity,
            notes=notes,
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Stock for '{dto.name}' is now {dto.stock_quantity}")


@click.command("show")
@click.option("--filter", "stock_filter",
              type=click.Choice([f.value for f in StockFilter], case_sensitive=False),
              default=StockFilter.ALL.value, show_default=True,
              help="Only low, out-of-stock or overstocked products.")
@click.pass_context
def inventory_show(ctx: click.Context, stock_filter: str) -> None:
    """Show current stock levels."""
    handler = ShowInventoryHandler(uow=unit_of_work(settings_from(ctx)))
    lines = handler.handle(StockFilter(stock_filter.lower()))

    if not lines:
        click.echo("No products found.")
        return

    click.echo(f"{'Product':<20} {'Stock':>8} {'Min':>6} {'Max':>6}  Flags")
    click.echo("-" * 56)
    for line in lines:
        flags = [
            label
            for label, on in (
                ("OUT", line.is_out_of_stock),
                ("LOW", line.is_low_stock and not line.is_out_of_stock),
                ("OVER", line.is_overstocked),
            )
            if on
        ]
        click.echo(
            f"{line.name:<20} {line.stock_quantity:>8} {line.min_stock_level:>6} "
            f"{line.max_stock_level:>6}  {' '.join(flags)}"
        )
