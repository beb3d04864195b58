"""Configuration for the comments microservice.

Settings are read once at startup into an immutable :class:`Settings` value and
passed explicitly to every component that needs them. Nothing in the service
looks configuration up from ambient/global state after that point.

Sources, lowest to highest precedence:

1. An optional ``appsettings.json`` file::

       {
         "ConnectionStrings": {"local": "sqlite:///comments.db"},
         "RootAddresses": {"WhiteLabel": "http://localhost:1041"}
       }

2. Environment variables ``COMMENTS_DB_URL``, ``COMMENTS_WHITE_LABEL_URL`` and
   ``COMMENTS_REGISTRATION_TIMEOUT``.
"""

from __future__ import annotations

import json
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DB_URL_ENV = "COMMENTS_DB_URL"  # pragma: no mutate
WHITE_LABEL_URL_ENV = "COMMENTS_WHITE_LABEL_URL"  # pragma: no mutate
REGISTRATION_TIMEOUT_ENV = "COMMENTS_REGISTRATION_TIMEOUT"  # pragma: no mutate
SETTINGS_FILE_ENV = "COMMENTS_SETTINGS_FILE"  # pragma: no mutate

DEFAULT_REGISTRATION_TIMEOUT = 5.0


class SettingsError(Exception):
    """Raised when the configuration sources are malformed."""


class DatabaseUrlNotSetError(SettingsError):
    """Raised when no database URL is configured."""

    def __init__(self) -> None:
        super().__init__(
            f"No database URL configured. Set {DB_URL_ENV} or "
            "ConnectionStrings.local in the settings file."
        )


@dataclass(frozen=True, slots=True)
class Settings:
    """Startup configuration, constructed once per process.

    Attributes:
        db_url: SQLAlchemy database URL of the comment store.
        white_label_address: Base address of the white-label directory. Empty
            means "do not register".
        registration_timeout: Upper bound, in seconds, for the registration call.
    """

    db_url: str
    white_label_address: str = ""
    registration_timeout: float = DEFAULT_REGISTRATION_TIMEOUT

    def __post_init__(self) -> None:
        if not math.isfinite(self.registration_timeout):
            raise SettingsError("registration_timeout must be a finite number")
        if self.registration_timeout <= 0:
            raise SettingsError("registration_timeout must be > 0")


def _read_settings_file(path: Path) -> dict[str, Any]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SettingsError(f"Cannot read settings file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SettingsError(f"Settings file {path} is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise SettingsError(f"Settings file {path} must contain a JSON object")
    return raw


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        raise SettingsError(f"Settings section {name!r} must be an object")
    return section


def _parse_timeout(value: str) -> float:
    try:
        return float(value)
    except ValueError as e:
        raise SettingsError(
            f"{REGISTRATION_TIMEOUT_ENV} must be a number, got {value!r}"
        ) from e


def load_settings(
    settings_file: Path | None = None, environ: Mapping[str, str] | None = None
) -> Settings:
    """Build :class:`Settings` from the settings file and the environment.

    Args:
        settings_file: Optional path to an ``appsettings.json``-style file. When
            omitted, ``COMMENTS_SETTINGS_FILE`` is consulted.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        The resolved settings.

    Raises:
        DatabaseUrlNotSetError: If no database URL is configured anywhere.
        SettingsError: If a source is malformed.
    """
    env = os.environ if environ is None else environ

    if settings_file is None and (path := env.get(SETTINGS_FILE_ENV)):
        settings_file = Path(path)

    db_url = ""
    white_label = ""
    timeout = DEFAULT_REGISTRATION_TIMEOUT

    if settings_file is not None:
        raw = _read_settings_file(settings_file)
        db_url = str(_section(raw, "ConnectionStrings").get("local") or "")
        white_label = str(_section(raw, "RootAddresses").get("WhiteLabel") or "")

    # environment overrides the file
    db_url = env.get(DB_URL_ENV) or db_url
    white_label = env.get(WHITE_LABEL_URL_ENV, white_label)
    if raw_timeout := env.get(REGISTRATION_TIMEOUT_ENV):
        timeout = _parse_timeout(raw_timeout)

    if not db_url:
        raise DatabaseUrlNotSetError

    return Settings(
        db_url=db_url,
        white_label_address=white_label.strip(),
        registration_timeout=timeout,
    )
