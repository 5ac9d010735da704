from pathlib import Path

import click

from ims.infrastructure.cli.inventory_commands import inventory_adjust, inventory_show
from ims.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_list,
    order_show,
    order_status,
)
from ims.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_show,
    product_update,
)
from ims.infrastructure.config import get_settings
from ims.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--data-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory holding ims.json (default: IMS_DATA_DIR or ./data).")
@click.option("--user", default=None, help="Acting user (default: IMS_USER).")
@click.option("--log-level", default=None, help="Logging level (default: IMS_LOG_LEVEL or INFO).")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, user: str | None, log_level: str | None) -> None:
    """IMS: Inventory and Order Management"""
    overrides = {
        key: value
        for key, value in (("data_dir", data_dir), ("user", user), ("log_level", log_level))
        if value is not None
    }
    settings = get_settings().model_copy(update=overrides)
    try:
        configure_logging(settings.log_level)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--log-level")
    ctx.obj = settings


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def inventory() -> None:
    """Inspect and correct stock levels."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_update)
inventory.add_command(inventory_adjust)
inventory.add_command(inventory_show)
