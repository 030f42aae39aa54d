"""CLI commands for fulfillment records."""

from __future__ import annotations

import click

from onedrop.application.dto import FulfillmentDTO
from onedrop.domain.exceptions import DomainException
from onedrop.domain.model.fulfillment import FulfillmentStatus
from onedrop.infrastructure.cli.context import services_from


def _display(records: list[FulfillmentDTO]) -> None:
    click.echo(
        f"{'Session':<28} {'Item':<16} {'Status':<10} {'Order':>10} {'Tries':>5}  Error"
    )
    click.echo("-" * 90)
    for r in records:
        session = r.session_id if len(r.session_id) <= 28 else r.session_id[:25] + "..."
        click.echo(
            f"{session:<28} {r.item_id:<16} {r.status:<10} "
            f"{r.provider_order_id or '-':>10} {r.attempts:>5}  {r.last_error or ''}"
        )


@click.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in FulfillmentStatus]),
    default=None,
    help="Only show records in this status.",
)
@click.pass_context
def fulfillment_list(ctx: click.Context, status: str | None) -> None:
    """List fulfillment records."""
    records = services_from(ctx).show_fulfillments().handle(status=status)

    if not records:
        click.echo("No fulfillment records found.")
        return
    _display(records)


@click.command("retry")
@click.argument("session_id", required=False)
@click.option("--all-failed", is_flag=True, help="Retry every failed or pending record.")
@click.pass_context
def fulfillment_retry(ctx: click.Context, session_id: str | None, all_failed: bool) -> None:
    """Retry fulfillment for a paid session (the sale itself is untouched)."""
    if bool(session_id) == all_failed:
        raise click.UsageError("Pass either SESSION_ID or --all-failed.")

    handler = services_from(ctx).retry_fulfillment()

    if all_failed:
        results = handler.handle_all_failed()
        if not results:
            click.echo("No failed or pending fulfillments.")
            return
        _display(results)
        still_failed = sum(1 for r in results if r.status == FulfillmentStatus.FAILED.value)
        click.echo(f"{len(results) - still_failed} recovered, {still_failed} still failing")
        return

    try:
        dto = handler.handle(session_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Session {dto.session_id}: {dto.status} "
        f"(provider order {dto.provider_order_id or '-'})"
    )
