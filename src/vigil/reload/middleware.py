"""Response decoration advertising Vigil on HTML pages.

Only headers are touched. The inject.js snippet reads them with a HEAD
request to decide whether to load the reload client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

    from vigil.reload.runtime import VigilRuntime

SCRIPT_PATH = "/vigil/dev-reload.js"
INLINE_SCRIPT_POLICY = "script-src 'self' 'unsafe-inline';"


def is_html(content_type: str | None) -> bool:
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower() == "text/html"


def extend_csp(existing: str | None) -> str:
    """Allow inline scripts, appending to an existing policy if there is one."""
    if existing:
        return f"{existing} {INLINE_SCRIPT_POLICY}"
    return INLINE_SCRIPT_POLICY


class VigilHeadersMiddleware(BaseHTTPMiddleware):
    """Marks HTML responses with the X-Vigil-* headers and an inline-script CSP."""

    def __init__(self, app: ASGIApp, runtime: VigilRuntime) -> None:
        super().__init__(app)
        self._runtime = runtime

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        if is_html(response.headers.get("content-type")):
            hot_reload = self._runtime.config.template_hot_reload
            response.headers["X-Vigil-Active"] = "true"
            response.headers["X-Vigil-HotReload"] = "true" if hot_reload else "false"
            response.headers["X-Vigil-Script-Path"] = SCRIPT_PATH
            response.headers["Content-Security-Policy"] = extend_csp(
                response.headers.get("content-security-policy")
            )

        return response
