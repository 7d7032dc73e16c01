"""Granian entrypoint serving build events over HTTP.

``create_app`` is the factory Granian loads as
``pubstatus.runtime:create_app``. A configured ``PUBSTATUS_GITHUB_TOKEN``
turns on ``POST /events/build``; without one only the probes are served, so
the container can start and report healthy before credentials are mounted.

Server settings come from the environment:

- ``PUBSTATUS_HOST`` / ``PUBSTATUS_PORT``: bind address, ``0.0.0.0:8080``
  unless set
- ``PUBSTATUS_LOG_LEVEL``: femtologging level, ``INFO`` unless set

Publishing settings are described on :class:`pubstatus.config.RuntimeSettings`.
"""

from __future__ import annotations

import os
import typing as typ

from pubstatus.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["APP_TARGET", "create_app", "main"]

logger = get_logger(__name__)

APP_TARGET = "pubstatus.runtime:create_app"

_DEFAULT_HOST = "0.0.0.0"  # noqa: S104 - containers expose every interface
_DEFAULT_PORT = "8080"
_PORT_RANGE = range(1, 65536)


def _parse_port(raw: str) -> int:
    """Return ``raw`` as a TCP port, exiting with status 1 when it is not one."""
    try:
        port: int | None = int(raw)
    except ValueError:
        port = None

    if port is None or port not in _PORT_RANGE:
        log_error(
            logger,
            "PUBSTATUS_PORT must be an integer from %d to %d, got %r",
            _PORT_RANGE.start,
            _PORT_RANGE.stop - 1,
            raw,
        )
        raise SystemExit(1)
    return port


def _configure_logging_from_env() -> str:
    """Apply ``PUBSTATUS_LOG_LEVEL`` and return the level in effect."""
    raw_level = os.environ.get("PUBSTATUS_LOG_LEVEL", "INFO")
    level, invalid = configure_logging(raw_level)
    if invalid:
        log_warning(logger, "ignoring PUBSTATUS_LOG_LEVEL %r; using %s", raw_level, level)
    return level


def create_app() -> falcon.asgi.App:
    """Build the ASGI app, accepting build events only when a token is set.

    Raises
    ------
    SettingsError
        If a token is configured but other settings are invalid.

    """
    from pubstatus.api.app import AppDependencies
    from pubstatus.api.app import create_app as _create_api_app
    from pubstatus.config import RuntimeSettings

    if os.environ.get("PUBSTATUS_GITHUB_TOKEN") is None:
        log_warning(
            logger,
            "PUBSTATUS_GITHUB_TOKEN is not set; serving health probes only",
        )
        return _create_api_app()

    return _create_api_app(AppDependencies(settings=RuntimeSettings.from_env()))


def main() -> None:
    """Serve :data:`APP_TARGET` with Granian until interrupted."""
    from granian import Granian
    from granian.constants import Interfaces

    level = _configure_logging_from_env()
    host = os.environ.get("PUBSTATUS_HOST", _DEFAULT_HOST)
    port = _parse_port(os.environ.get("PUBSTATUS_PORT", _DEFAULT_PORT))

    log_info(logger, "serving build events on %s:%d (log level %s)", host, port, level)
    Granian(
        APP_TARGET,
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    ).serve()


if __name__ == "__main__":
    main()
