"""
Request/response audit logging.

Every request is logged with its method, path, query string, headers and body;
every response with its status code, elapsed time, headers and body. The
Authorization header is always written as [REDACTED].

The downstream response body is drained into a buffer that lives only for the
current request, logged, and then replayed unchanged to the client. Logging is
best effort: a failure to format or emit a record never changes what the client
receives.
"""

import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("app.audit")

REDACTED = "[REDACTED]"
SENSITIVE_HEADERS = {"authorization"}


def format_headers(headers) -> str:
    """Render headers one per line as '  name: value', redacting credentials."""
    lines = []
    for name, value in headers.items():
        if name.lower() in SENSITIVE_HEADERS:
            lines.append(f"  {name}: {REDACTED}")
        else:
            lines.append(f"  {name}: {value}")
    return "\n".join(lines)


def _decode_body(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


class RequestResponseLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request/response pair without altering either."""

    async def dispatch(self, request: Request, call_next):
        # Starlette caches the body and replays it to the downstream app.
        body = await request.body()
        self._log_request(request, body)

        started = time.perf_counter()
        try:
            response = await call_next(request)
            captured = b"".join([chunk async for chunk in response.body_iterator])
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(
                "HTTP Response: unhandled error for %s %s (%.0fms)",
                request.method,
                request.url.path,
                elapsed_ms,
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        self._log_response(response, elapsed_ms, captured)

        return Response(
            content=captured,
            status_code=response.status_code,
            headers=response.headers,
        )

    def _log_request(self, request: Request, body: bytes) -> None:
        try:
            query = f"?{request.url.query}" if request.url.query else ""
            logger.info(
                "HTTP Request: %s %s %s\nHeaders:\n%s\nBody: %s",
                request.method,
                request.url.path,
                query,
                format_headers(request.headers),
                _decode_body(body),
            )
        except Exception:
            logger.warning("Failed to log request", exc_info=True)

    def _log_response(self, response: Response, elapsed_ms: float, body: bytes) -> None:
        try:
            logger.info(
                "HTTP Response: %s (%.0fms)\nHeaders:\n%s\nBody: %s",
                response.status_code,
                elapsed_ms,
                format_headers(response.headers),
                _decode_body(body),
            )
        except Exception:
            logger.warning("Failed to log response", exc_info=True)
