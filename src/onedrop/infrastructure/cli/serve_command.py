"""CLI command that runs the HTTP app."""

from __future__ import annotations

import click
import uvicorn

from onedrop.infrastructure.cli.context import services_from
from onedrop.infrastructure.config import Settings
from onedrop.infrastructure.web.app import create_app


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Serve the checkout, webhook and inventory endpoints."""
    root = ctx.find_root()
    settings = root.obj if isinstance(root.obj, Settings) else None
    app = create_app(services=services_from(ctx), settings=settings)
    uvicorn.run(app, host=host, port=port, log_config=None)
