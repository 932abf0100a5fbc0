"""
Middleware for request path normalization.
"""

import logging

from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


class TrailingSlashMiddleware:
    """
    ASGI middleware that strips trailing slashes from request paths.

    ``/api/contact/`` and ``/thanks/`` are routed exactly like ``/api/contact``
    and ``/thanks``. The path is rewritten in the scope, so no redirect is
    issued and a POST body is never dropped by a 307 round trip.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] == "http":
            path = scope["path"]

            if path != "/" and path.endswith("/"):
                normalized_path = path.rstrip("/") or "/"
                scope["path"] = normalized_path
                # raw_path never carries the query string
                scope["raw_path"] = normalized_path.encode("utf-8")

                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(f"Normalized path: {scope.get('method', '')} {path} -> {normalized_path}")

        await self.app(scope, receive, send)
