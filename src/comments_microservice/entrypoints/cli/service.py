"""Service lifecycle commands: ``register`` and ``start``."""

from __future__ import annotations

import click

from comments_microservice.adapters.db.context import CommentContext
from comments_microservice.bootstrap import AppContainer, run
from comments_microservice.bootstrap.bootstrap import SERVICE_LABEL, build_directory
from comments_microservice.interfaces.schema import SchemaBootstrapError
from comments_microservice.service_layer import WhiteLabelManager

from ._settings import load_cli_settings
from .helpers import success, warn


@click.command()
@click.pass_context
def register(ctx: click.Context) -> None:
    """Register this service with the white-label directory."""
    settings = load_cli_settings(ctx)
    manager = WhiteLabelManager(build_directory(settings))
    if manager.initialize(SERVICE_LABEL, settings.white_label_address, CommentContext):
        success(f"Registered {SERVICE_LABEL} at {settings.white_label_address}")
    else:
        warn("Registration did not succeed; see the log for details.")


def _report_ready(container: AppContainer) -> None:
    schema = container.schema
    click.echo(f"Schema      : ready (created={schema.created}, applied={len(schema.applied)})")
    click.echo(f"Discoverable: {'yes' if container.registered else 'no'}")
    success(f"{SERVICE_LABEL} service is up")


@click.command()
@click.pass_context
def start(ctx: click.Context) -> None:
    """Run startup (schema bootstrap, then registration) and report readiness."""
    settings = load_cli_settings(ctx)
    try:
        run(settings, _report_ready)
    except SchemaBootstrapError as e:
        raise click.ClickException(f"Startup aborted: {e}") from e
