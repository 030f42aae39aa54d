import click

from onedrop.infrastructure.cli.fulfillment_commands import fulfillment_list, fulfillment_retry
from onedrop.infrastructure.cli.inventory_commands import inventory_show
from onedrop.infrastructure.cli.product_commands import product_list
from onedrop.infrastructure.cli.serve_command import serve
from onedrop.infrastructure.config import Settings
from onedrop.infrastructure.logging_setup import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """One Drop: single-unit checkout and fulfillment"""
    if ctx.obj is None:
        settings = Settings()
        configure_logging(settings.log_level)
        ctx.obj = settings


@cli.group()
def product() -> None:
    """Browse the catalog."""


@cli.group()
def inventory() -> None:
    """Inspect sale status."""


@cli.group()
def fulfillment() -> None:
    """Inspect and retry production orders."""


# Register subcommands
cli.add_command(serve)
product.add_command(product_list)
inventory.add_command(inventory_show)
fulfillment.add_command(fulfillment_list)
fulfillment.add_command(fulfillment_retry)
