"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from ims.application.add_product import AddProductHandler
from ims.application.delete_product import DeleteProductHandler
from ims.application.list_products import ListProductsHandler
from ims.application.show_product import ShowProductHandler
from ims.application.update_product import UpdateProductHandler
from ims.domain.exceptions import DomainException
from ims.infrastructure.bootstrap import unit_of_work
from ims.infrastructure.cli.common import domain_error, settings_from


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Selling price (e.g. 15.00).")
@click.option("--cost", "cost_price", required=True, help="Cost price (e.g. 9.50).")
@click.option("--stock", "stock_quantity", type=int, default=0, show_default=True, help="Initial stock.")
@click.option("--min-stock", type=int, default=0, show_default=True, help="Low-stock threshold.")
@click.option("--max-stock", type=int, default=1000, show_default=True, help="Overstock threshold.")
@click.option("--sku", default=None, help="Stock keeping unit (unique).")
@click.option("--category", "category_id", default=None, help="Category ID.")
@click.option("--brand", default=None, help="Brand name.")
@click.option("--supplier", default=None, help="Supplier name.")
@click.option("--unit", default=None, help="Unit of measurement (e.g. pieces, kg).")
@click.pass_context
def product_add(
    ctx: click.Context,
    name: str,
    price: str,
    cost_price: str,
    stock_quantity: int,
    min_stock: int,
    max_stock: int,
    sku: str | None,
    category_id: str | None,
    brand: str | None,
    supplier: str | None,
    unit: str | None,
) -> None:
    """Add a new product to the catalog."""
    settings = settings_from(ctx)
    handler = AddProductHandler(uow=unit_of_work(settings), currency=settings.currency)

    try:
        product = handler.handle(
            name=name,
            price=price,
            cost_price=cost_price,
            stock_quantity=stock_quantity,
            min_stock_level=min_stock,
            max_stock_level=max_stock,
            sku=sku,
            category_id=category_id,
            brand=brand,
            supplier=supplier,
            unit=unit,
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(
        f"Product #{product.id} '{product.name}' added at {product.price} "
        f"with {product.stock_quantity} in stock"
    )


@click.command("list")
@click.option("--search", default=None, help="Match name, SKU or description.")
@click.option("--category", "category_id", default=None, help="Only this category ID.")
@click.option("--brand", default=None, help="Only this brand.")
@click.option("--supplier", default=None, help="Only this supplier.")
@click.option("--min-price", default=None, help="Lowest selling price (inclusive).")
@click.option("--max-price", default=None, help="Highest selling price (inclusive).")
@click.option("--all", "include_inactive", is_flag=True, default=False, help="Include inactive products.")
@click.pass_context
def product_list(
    ctx: click.Context,
    search: str | None,
    category_id: str | None,
    brand: str | None,
    supplier: str | None,
    min_price: str | None,
    max_price: str | None,
    include_inactive: bool,
) -> None:
    """List products in the catalog."""
    handler = ListProductsHandler(uow=unit_of_work(settings_from(ctx)))

    try:
        products = handler.handle(
            search=search,
            category_id=category_id,
            brand=brand,
            supplier=supplier,
            min_price=min_price,
            max_price=max_price,
            include_inactive=include_inactive,
        )
    except DomainException as exc:
        raise domain_error(exc)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'SKU':<12} {'Price':>10} {'Cost':>10} {'Active':>7}")
    click.echo("-" * 70)
    for p in products:
        click.echo(
            f"{p.id:<6} {p.name:<20} {p.sku or '-':<12} {p.price:>10} "
            f"{p.cost_price:>10} {'yes' if p.is_active else 'no':>7}"
        )


@click.command("show")
@click.option("--id", "product_id", default=None, help="Product ID to display.")
@click.option("--sku", default=None, help="SKU to display.")
@click.pass_context
def product_show(ctx: click.Context, product_id: str | None, sku: str | None) -> None:
    """Show one product by ID or SKU."""
    handler = ShowProductHandler(uow=unit_of_work(settings_from(ctx)))

    try:
        p = handler.handle(product_id=product_id, sku=sku)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Product #{p.id} {p.name}  ({'active' if p.is_active else 'inactive'})")
    for label, value in (
        ("SKU", p.sku),
        ("Category", p.category_id),
        ("Brand", p.brand),
        ("Supplier", p.supplier),
        ("Unit", p.unit),
        ("About", p.description),
    ):
        if value:
            click.echo(f"{label + ':':<10} {value}")
    click.echo(f"{'Price:':<10} {p.price} (cost {p.cost_price}, margin {p.profit_margin})")
    click.echo(f"{'Stock:':<10} {p.stock_quantity} (min {p.min_stock_level}, max {p.max_stock_level})")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID to delete.")
@click.pass_context
def product_delete(ctx: click.Context, product_id: str) -> None:
    """Remove a product that is not on any open order."""
    handler = DeleteProductHandler(uow=unit_of_work(settings_from(ctx)))

    try:
        handler.handle(product_id)
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Product #{product_id} deleted")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--cost", "cost_price", default=None, help="New cost price.")
@click.option("--min-stock", type=int, default=None, help="New low-stock threshold.")
@click.option("--max-stock", type=int, default=None, help="New overstock threshold.")
@click.option("--active/--inactive", "is_active", default=None, help="Activate or deactivate.")
@click.pass_context
def product_update(
    ctx: click.Context,
    product_id: str,
    price: str | None,
    cost_price: str | None,
    min_stock: int | None,
    max_stock: int | None,
    is_active: bool | None,
) -> None:
    """Update a product's price, thresholds or active flag."""
    settings = settings_from(ctx)
    handler = UpdateProductHandler(uow=unit_of_work(settings), currency=settings.currency)

    try:
        product = handler.handle(
            product_id=product_id,
            price=price,
            cost_price=cost_price,
            min_stock_level=min_stock,
            max_stock_level=max_stock,
            is_active=is_active,
        )
    except DomainException as exc:
        raise domain_error(exc)

    click.echo(f"Product #{product.id} '{product.name}' updated")
