"""Request logging and crash recovery middleware."""
from __future__ import annotations

import logging
import time
import uuid

from django.http import JsonResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdFilter(logging.Filter):
    """Give every record a ``request_id`` so the formatter never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


def request_logger(request) -> logging.LoggerAdapter:
    """Return the request-scoped logger, or an anonymous one outside the middleware."""
    log = getattr(request, "log", None)
    if log is None:
        log = logging.LoggerAdapter(logger, {"request_id": "-"})
    return log


class RequestLoggingMiddleware:
    """Tag each request with an id and log it on the way in and out."""

    def __init__(self, get_response) -> None:
        self.get_response = get_response

    def __call__(self, request):
        start = time.monotonic()
        request_id = str(uuid.uuid4())
        request.request_id = request_id
        request.log = logging.LoggerAdapter(logger, {"request_id": request_id})

        request.log.info(
            "request_in method=%s path=%s query=%s remote_addr=%s",
            request.method,
            request.path,
            request.META.get("QUERY_STRING", ""),
            request.META.get("REMOTE_ADDR", ""),
        )

        response = self.get_response(request)

        response[REQUEST_ID_HEADER] = request_id
        size = 0 if response.streaming else len(response.content)
        request.log.info(
            "request_out status=%s bytes=%s duration_ms=%.2f",
            response.status_code,
            size,
            (time.monotonic() - start) * 1000,
        )
        return response


class RecoveryMiddleware:
    """Turn unhandled view exceptions into a JSON 500."""

    def __init__(self, get_response) -> None:
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        request_logger(request).error("panic recovered: %s", exception, exc_info=exception)
        return JsonResponse(
            {
                "error": "internal_server_error",
                "error_description": "An unexpected error occurred while processing the request.",
            },
            status=500,
        )
