from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response

from ..abstractions import Logger, RequestContext

# A single read never blocks past the socket timeout, so small reads keep a
# trickling body from outliving the deadline.
READ_CHUNK_SIZE = 1


class ProviderError(RuntimeError):
    """Base provider error."""


class ZipcodeNotFound(ProviderError):
    """Raised when the lookup service does not know the postal code."""


@dataclass
class RequestConfig:
    timeout: float = 5.0


class HTTPProvider:
    """Base class that adds deadlines, timeouts and logging for HTTP providers."""

    name = "http"

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    def _logger(self, context: Optional[RequestContext]) -> Logger:
        if context is not None:
            return context.log
        return self._log

    def _timeout(self, context: Optional[RequestContext]) -> float:
        timeout = self.request_config.timeout
        remaining = context.remaining() if context is not None else None
        if remaining is None:
            return timeout
        if remaining <= 0:
            raise ProviderError("deadline exceeded")
        return min(timeout, remaining)

    def _request(
        self,
        method: str,
        url: str,
        context: Optional[RequestContext] = None,
        **kwargs,
    ) -> Response:
        log = self._logger(context)
        try:
            timeout = self._timeout(context)
        except ProviderError:
            log.error("%s: deadline exceeded before request to %s", self.name, url)
            raise
        try:
            response = self.session.request(method, url, timeout=timeout, stream=True, **kwargs)
            self._read_body(response, context)
        except requests.Timeout as exc:
            log.error("%s: request timed out", self.name, exc_info=exc)
            raise ProviderError("timeout") from exc
        except requests.RequestException as exc:
            log.error("%s: request failed", self.name, exc_info=exc)
            raise ProviderError("request failed") from exc
        except ProviderError:
            log.error("%s: deadline exceeded while reading %s", self.name, url)
            raise
        return response

    def _read_body(self, response: Response, context: Optional[RequestContext]) -> None:
        """Load the body in small reads, giving up once the deadline has passed."""
        chunks = []
        for chunk in response.iter_content(chunk_size=READ_CHUNK_SIZE):
            chunks.append(chunk)
            remaining = context.remaining() if context is not None else None
            if remaining is not None and remaining <= 0:
                response.close()
                raise ProviderError("deadline exceeded")
        # Same cache ``Response.content`` fills; ``json()`` and ``text`` read from it.
        response._content = b"".join(chunks)

    def _json(self, response: Response, log: Logger) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            log.error("%s: failed to decode JSON", self.name, exc_info=exc)
            raise ProviderError("invalid json") from exc


__all__ = ["HTTPProvider", "ProviderError", "RequestConfig", "ZipcodeNotFound"]
