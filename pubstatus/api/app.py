"""Application factory for the pubstatus Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health endpoints and, when publishing settings are
available, the build event intake endpoint.

Usage
-----
Create a health-only app (no GitHub token)::

    app = create_app()

Create a full app accepting build events::

    from pubstatus.api.app import AppDependencies, create_app
    from pubstatus.config import RuntimeSettings

    app = create_app(AppDependencies(settings=RuntimeSettings.from_env()))

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi
import httpx

from pubstatus.api.errors import InvalidInputError, handle_invalid_input
from pubstatus.api.health.resources import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    from pubstatus.config import RuntimeSettings

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    settings
        Credentials and publisher settings. When ``None`` only health
        endpoints are registered.
    http_client
        Transport shared by all requests. When ``None`` and settings are
        present, the app creates its own client and closes it on shutdown.

    """

    settings: RuntimeSettings | None = None
    http_client: httpx.AsyncClient | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or lacking settings,
        only ``/health`` and ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    middleware: list[object] = []
    settings = dependencies.settings if dependencies is not None else None
    http_client: httpx.AsyncClient | None = None

    if settings is not None and dependencies is not None:
        http_client = dependencies.http_client
        if http_client is None:
            from pubstatus.api.middleware import HTTPClientLifecycle

            http_client = httpx.AsyncClient(
                timeout=settings.timeout_s, follow_redirects=True
            )
            middleware.append(HTTPClientLifecycle(http_client))

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    # Health endpoints are always available
    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())

    # Event intake requires a token to post statuses with
    if settings is not None and http_client is not None:
        from pubstatus.api.events.resources import BuildEventResource

        app.add_route(
            "/events/build",
            BuildEventResource(settings=settings, http_client=http_client),
        )

    app.add_error_handler(InvalidInputError, handle_invalid_input)

    return app
