"""
ASGI middleware for correlation ID propagation and request error boundaries.

Extracts or generates x-correlation-id on each request, sets it in the
logging context, and returns it in the response. The error boundary is
mounted inside the correlation middleware, which adds the header to its
responses; it logs unhandled exceptions in full and answers with the
standard failure envelope.
"""

import json
import traceback

from pdf_api.logging_config import (
    CORRELATION_HEADER,
    generate_correlation_id,
    get_correlation_id,
    get_logger,
    is_production,
    set_correlation_id,
)

logger = get_logger("middleware")


class CorrelationIdMiddleware:
    """ASGI middleware that manages x-correlation-id for every request.

    - Reads x-correlation-id from incoming request headers.
    - Generates a new one if absent.
    - Sets it in the logging context (contextvars).
    - Injects it into the response headers.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        cid_header = CORRELATION_HEADER.encode("utf-8")
        cid = headers.get(cid_header, b"").decode("utf-8")
        if not cid:
            cid = generate_correlation_id()
        set_correlation_id(cid)

        async def send_with_correlation(message):
            if message["type"] == "http.response.start":
                response_headers = list(message.get("headers", []))
                response_headers.append((cid_header, cid.encode("utf-8")))
                message = {**message, "headers": response_headers}
            await send(message)

        await self.app(scope, receive, send_with_correlation)


class ErrorBoundaryMiddleware:
    """ASGI middleware that catches unhandled exceptions at the entrypoint.

    - Logs the full error with stack trace and correlation ID.
    - Returns the failure envelope with code INTERNAL_ERROR.
    - In development, includes the error message and stack trace.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking(message):
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking)
        except Exception as exc:
            cid = get_correlation_id()
            logger.error(f"Unhandled exception: {exc}", exc_info=True)

            if response_started:
                raise

            payload = {
                "success": False,
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "Internal server error" if is_production() else str(exc),
                },
                "correlationId": cid,
            }
            if not is_production():
                payload["stackTrace"] = traceback.format_exc()

            await send({
                "type": "http.response.start",
                "status": 500,
                "headers": [(b"content-type", b"application/json")],
            })
            await send({
                "type": "http.response.body",
                "body": json.dumps(payload).encode(),
            })
