"""Comments microservice CLI entry point.

Defines the top-level ``comments-microservice`` command (via Click-Extra) and
registers its subcommands:

- ``db``: schema status, bootstrap and migration history.
- ``register``: white-label directory registration on its own.
- ``start``: the full startup sequence.

Examples
    $ comments-microservice --version
    $ COMMENTS_DB_URL=sqlite:///comments.db comments-microservice start
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from comments_microservice import __version__
from comments_microservice.config import SETTINGS_FILE_ENV
from comments_microservice.logging import (
    config_console_handler,
    config_flight_recorder,
    log_startup,
)

from .db import db as db_group
from .helpers import parse_log_level
from .service import register, start

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """Comments microservice command-line interface.

    Brings the comment store's schema to its latest version, registers the
    service with the white-label directory, and reports whether it is ready.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help="Increase the default WARNING verbosity by one level per repetition.",
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help="Decrease the default WARNING verbosity by one level per repetition.",
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (DEBUG console output with source locations).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path the flight recorder writes to.",
    default=None,
    envvar="COMMENTS_LOG_PATH",
    show_envvar=True,
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep recent DEBUG records in memory and write them to --log-path when a "
        "WARNING/ERROR occurs (or on exit with --force-flush)."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Write the flight recorder buffer to --log-path on exit.",
    default=False,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). Repeatable, e.g. "
        "-L sqlalchemy=INFO -L httpx=DEBUG, or via COMMENTS_LOGGER_LEVELS."
    ),
    envvar="COMMENTS_LOGGER_LEVELS",
    show_envvar=True,
)
@click.option(
    "--settings",
    "settings_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="appsettings.json with ConnectionStrings.local and RootAddresses.WhiteLabel.",
    envvar=SETTINGS_FILE_ENV,
    show_envvar=True,
)
@clickx.pass_context
def comments_microservice(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path | None,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
    settings_file: Path | None,
) -> None:
    """Comments microservice command-line interface."""

    # 0) compute effective verbosity
    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    handlers: list[Handler] = [
        config_console_handler(level=level, debug_mode=debug, color=ctx.color is not False)
    ]

    # 1) flight recorder
    if flight_recorder:
        if log_path is None:
            log_dir = user_log_dir("comments-microservice", appauthor=False, ensure_exists=True)
            log_path = Path(log_dir) / "latest.log"
        handlers.append(
            config_flight_recorder(path=log_path, flush_on_close=force_flush_flight_recorder)
        )

    # 2) root logger captures everything; handlers filter
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        logger_levels=logger_levels,
    )

    ctx.ensure_object(dict)["settings_file"] = settings_file
    ctx.call_on_close(logging.shutdown)


comments_microservice.add_command(db_group)
comments_microservice.add_command(register)
comments_microservice.add_command(start)
