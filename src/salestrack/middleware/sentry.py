"""Sentry context middleware to capture request context in error reports."""

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from salestrack.core.logging import get_owner_id, get_request_id


class SentryContextMiddleware:
    """
    Inject request context into Sentry error reports.

    Runs inside RequestIDMiddleware, so the request ID and owner scope are
    already bound to the context.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = get_request_id()
        owner_id = get_owner_id()

        sentry_sdk.set_tag("request_id", request_id)
        if owner_id:
            sentry_sdk.set_tag("owner_id", owner_id)
        sentry_sdk.set_context(
            "request",
            {
                "method": scope.get("method"),
                "path": scope.get("path"),
                "request_id": request_id,
            },
        )

        await self.app(scope, receive, send)
