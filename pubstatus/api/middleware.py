"""HTTP client lifecycle middleware for Falcon ASGI applications.

The application shares one ``httpx.AsyncClient`` across requests so that
connections to the GitHub API are pooled. When the application created the
client itself, this middleware closes it on ASGI lifespan shutdown.

Usage
-----
Register the middleware when creating the Falcon app::

    client = httpx.AsyncClient(timeout=settings.timeout_s)
    app = falcon.asgi.App(middleware=[HTTPClientLifecycle(client)])

"""

from __future__ import annotations

import typing as typ

from pubstatus.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    import httpx

__all__ = ["HTTPClientLifecycle"]

logger = get_logger(__name__)


class HTTPClientLifecycle:
    """Falcon middleware closing an owned ``httpx.AsyncClient`` on shutdown."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        """Initialize the middleware with the client it owns."""
        self._http_client = http_client

    async def process_shutdown(
        self,
        _scope: dict[str, typ.Any],
        _event: dict[str, typ.Any],
    ) -> None:
        """Close the HTTP client when the ASGI server shuts down."""
        if not self._http_client.is_closed:
            await self._http_client.aclose()
            log_info(logger, "closed GitHub API client")
