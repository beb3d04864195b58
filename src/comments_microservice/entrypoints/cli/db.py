"""Schema commands.

- ``db status``: schema state plus applied and pending migrations.
- ``db bootstrap``: run the schema bootstrapper to ``READY``.
- ``db history``: list the migration-history records.

Human-oriented notices go to stderr; listings go to stdout.
"""

from __future__ import annotations

import click
import click_extra as clickx
from sqlalchemy.exc import ArgumentError, OperationalError

from comments_microservice.adapters.db.context import CommentContext
from comments_microservice.interfaces.schema import SchemaBootstrapError, SchemaState

from ._settings import load_cli_settings
from .helpers import sanitize_url, success, warn

CANNOT_CONNECT_MSG = (
    "The database is not reachable.\n"
    "Please ensure the database is running and the URL is correct."
)
INVALID_URL_FORMAT_MSG = "The configured database URL is not a valid SQLAlchemy URL."
BOOTSTRAP_INSTRUCTIONS = "Run 'comments-microservice db bootstrap' to update the schema."


def _open_context(ctx: click.Context) -> CommentContext:
    settings = load_cli_settings(ctx)
    try:
        return CommentContext(settings.db_url)
    except ArgumentError as e:
        raise click.ClickException(INVALID_URL_FORMAT_MSG) from e


@click.group(cls=clickx.ExtraGroup)
def db() -> None:
    """Schema management commands."""


@db.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show schema state and migrations."""
    with _open_context(ctx) as context:
        try:
            schema = context.bootstrapper().status()
        except OperationalError as e:
            raise click.ClickException(CANNOT_CONNECT_MSG) from e
        click.echo(f"Backend : {context.engine.dialect.name}")
        click.echo(f"URL     : {sanitize_url(str(context.engine.url))}")
        click.echo(f"Schema  : {schema.state.value}")
        for migration_id in schema.applied:
            click.echo(f"  applied  {migration_id}")
        for migration_id in schema.pending:
            click.echo(f"  pending  {migration_id}")
    if schema.state is not SchemaState.READY:
        warn(BOOTSTRAP_INSTRUCTIONS)


@db.command()
@click.pass_context
def bootstrap(ctx: click.Context) -> None:
    """Create or migrate the schema to the latest version."""
    with _open_context(ctx) as context:
        try:
            report = context.bootstrapper().run()
        except SchemaBootstrapError as e:
            raise click.ClickException(f"Schema bootstrap failed: {e}") from e
    if report.created:
        success(f"Schema created ({len(report.seeded)} migration(s) recorded)")
    elif report.applied:
        success(f"Applied {len(report.applied)} migration(s)")
    else:
        success("Schema already up to date")


@db.command()
@click.pass_context
def history(ctx: click.Context) -> None:
    """List applied migrations."""
    with _open_context(ctx) as context:
        try:
            records = context.bootstrapper().records()
        except OperationalError as e:
            raise click.ClickException(CANNOT_CONNECT_MSG) from e
    for record in records:
        click.echo(f"{record.migration_id}  ({record.product_version})")
