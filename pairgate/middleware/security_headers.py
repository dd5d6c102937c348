"""Security response headers.

Every response gets the standard hardening headers. Responses from the
pairing endpoints also get ``Cache-Control: no-store`` so issued codes
and the numbers they resolve to are never kept by browsers or proxies.
Relayed image bodies stream through untouched (pure ASGI, no buffering).
"""

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

SECURITY_HEADERS: dict[str, str] = {
    "x-content-type-options": "nosniff",
    "x-frame-options": "DENY",
    "x-xss-protection": "0",
    "referrer-policy": "strict-origin-when-cross-origin",
}

NO_STORE_PATHS = ("/api/pair", "/api/verify-pair")


class SecurityHeadersMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        no_store = scope.get("path", "") in NO_STORE_PATHS

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                # Assignment replaces values set further down the stack
                for name, value in SECURITY_HEADERS.items():
                    headers[name] = value
                if no_store:
                    headers["cache-control"] = "no-store"
            await send(message)

        await self.app(scope, receive, send_with_headers)
