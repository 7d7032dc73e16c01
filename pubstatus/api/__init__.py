"""pubstatus HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives build-completion events and hands them to
the status publisher.

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with health
    endpoints and, when publishing settings are provided, the build event
    intake endpoint.
"""

from pubstatus.api.app import create_app

__all__ = ["create_app"]
