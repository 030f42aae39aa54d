"""CLI commands for sale status."""

from __future__ import annotations

import click

from onedrop.infrastructure.cli.context import services_from


@click.command("show")
@click.pass_context
def inventory_show(ctx: click.Context) -> None:
    """Show the sale status of every item."""
    statuses = services_from(ctx).show_inventory().handle()

    if not statuses:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'Item':<24} {'Status':<10}")
    click.echo("-" * 35)
    for item_id, status in sorted(statuses.items()):
        click.echo(f"{item_id:<24} {status:<10}")
