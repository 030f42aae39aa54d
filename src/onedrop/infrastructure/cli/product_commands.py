"""CLI commands for the catalog."""

from __future__ import annotations

import click

from onedrop.infrastructure.cli.context import services_from


@click.command("list")
@click.pass_context
def product_list(ctx: click.Context) -> None:
    """List all items in the catalog with their availability."""
    products = services_from(ctx).list_products().handle()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<16} {'Title':<24} {'Price':>10} {'Sizes':<16} {'Status':<10}")
    click.echo("-" * 80)
    for p in products:
        click.echo(
            f"{p.id:<16} {p.title:<24} {p.price:>10} {','.join(p.sizes):<16} {p.status:<10}"
        )
