"""Build event intake for prerelease status publication.

``POST /events/build`` accepts one build-completion event, in the envelope
``{"data": {"Build": [...]}}``, and responds with the folded
:class:`~pubstatus.results.Outcome` of publishing its statuses.

Usage
-----
Register the resource on the Falcon app::

    app.add_route(
        "/events/build",
        BuildEventResource(settings=settings, http_client=http_client),
    )

"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

from pubstatus.api.errors import InvalidInputError
from pubstatus.models import decode_build_event
from pubstatus.publisher import post_status_to_github

if typ.TYPE_CHECKING:
    import httpx
    from falcon.asgi import Request, Response

    from pubstatus.config import RuntimeSettings

__all__ = ["BuildEventResource"]


class BuildEventResource:
    """Resource handing decoded build events to the status publisher."""

    def __init__(
        self,
        *,
        settings: RuntimeSettings,
        http_client: httpx.AsyncClient,
    ) -> None:
        """Configure the resource with credentials and a shared transport."""
        self._settings = settings
        self._http_client = http_client

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /events/build.

        Responds ``200`` when the outcome is a success and ``500`` when any
        part of the event failed; the body is the outcome in both cases.

        Raises
        ------
        InvalidInputError
            If the body is not a JSON build event.

        """
        body = await req.stream.read()
        try:
            event = decode_build_event(body)
        except msgspec.DecodeError as exc:
            raise InvalidInputError(str(exc), field="body") from exc

        outcome = await post_status_to_github(
            event,
            self._settings.github_token,
            self._http_client,
            settings=self._settings.publisher,
        )
        resp.content_type = falcon.MEDIA_JSON
        resp.data = msgspec.json.encode(outcome)
        resp.status = falcon.HTTP_200 if outcome.ok else falcon.HTTP_500
