"""Resolves the Services for a CLI invocation.

The root group stores Settings on the click context; tests pass a
ready-made Services object instead.
"""

from __future__ import annotations

import click

from onedrop.infrastructure.bootstrap import Services, build_services


def services_from(ctx: click.Context) -> Services:
    root = ctx.find_root()
    if not isinstance(root.obj, Services):
        root.obj = build_services(root.obj)
    return root.obj
