"""Settings resolution for CLI commands."""

from __future__ import annotations

import click

from comments_microservice import config

MISSING_DB_URL_MSG = (
    f"{config.DB_URL_ENV} is not set.\n\n"
    "Set it before running this command, e.g.:\n"
    f"  export {config.DB_URL_ENV}='sqlite:///comments.db'\n"
    "or point --settings at an appsettings.json with ConnectionStrings.local."
)


def load_cli_settings(ctx: click.Context) -> config.Settings:
    """Load settings once for the invocation and cache them on the root context.

    Raises:
        click.ClickException: If the configuration is missing or malformed.
    """
    obj = ctx.find_root().ensure_object(dict)
    if "settings" not in obj:
        try:
            obj["settings"] = config.load_settings(obj.get("settings_file"))
        except config.DatabaseUrlNotSetError as e:
            raise click.ClickException(MISSING_DB_URL_MSG) from e
        except config.SettingsError as e:
            raise click.ClickException(str(e)) from e
    return obj["settings"]
