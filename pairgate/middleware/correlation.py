"""Request correlation.

Tags each HTTP request with an ID that lands in every log line written
while handling it and is echoed back in ``X-Correlation-ID``. A caller's
ID is reused only when it is short and made of safe characters, so it
cannot inject text into the log stream. Health probes are not logged.
"""

import re
import time
import uuid

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from pairgate.logging_config import correlation_id_ctx, get_logger

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
_VALID_CORRELATION_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")
_QUIET_PATH_PREFIX = "/health"


def resolve_correlation_id(incoming: str | None) -> str:
    """Reuse a well-formed caller ID, otherwise mint a new one."""
    if incoming and _VALID_CORRELATION_ID.match(incoming):
        return incoming
    return uuid.uuid4().hex


class CorrelationIdMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = dict(scope.get("headers", [])).get(b"x-correlation-id")
        correlation_id = resolve_correlation_id(
            incoming.decode("latin-1") if incoming else None
        )
        token = correlation_id_ctx.set(correlation_id)

        path = scope.get("path", "")
        quiet = path.startswith(_QUIET_PATH_PREFIX)
        started = time.perf_counter()
        status_code: int | None = None

        async def send_with_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message)[CORRELATION_ID_HEADER] = correlation_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_id)
        except Exception:
            logger.exception("Unhandled error", method=scope.get("method"), path=path)
            raise
        else:
            if not quiet:
                logger.info(
                    "Request handled",
                    method=scope.get("method"),
                    path=path,
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
        finally:
            correlation_id_ctx.reset(token)
