"""Core abstractions for the CEP weather domain."""
from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional, Protocol, Union

from .entities import PostalCode


@dataclass(frozen=True)
class LocalityRecord:
    """Address data returned by a postal code lookup."""

    cep: str = ""
    street: str = ""
    neighborhood: str = ""
    locality: str = ""
    state: str = ""
    ibge: str = ""


@dataclass(frozen=True)
class Location:
    name: str = ""
    region: str = ""
    country: str = ""


@dataclass(frozen=True)
class CurrentConditions:
    temp_c: float
    temp_f: Optional[float] = None
    condition: str = ""
    last_updated: str = ""


@dataclass(frozen=True)
class WeatherRecord:
    """Current conditions for a location, as reported by a weather provider."""

    current: CurrentConditions
    location: Location = field(default_factory=Location)


Logger = Union[logging.Logger, logging.LoggerAdapter]


@dataclass(frozen=True)
class RequestContext:
    """Per-request state handed to every port call.

    ``deadline`` is an absolute :func:`time.monotonic` timestamp; outbound
    calls must not outlive it.
    """

    log: Logger
    request_id: str = ""
    deadline: Optional[float] = None

    @classmethod
    def create(
        cls,
        logger: Optional[logging.Logger] = None,
        timeout: Optional[float] = None,
        request_id: Optional[str] = None,
    ) -> "RequestContext":
        request_id = request_id or uuid.uuid4().hex
        base = logger or logging.getLogger("core.request")
        adapter = logging.LoggerAdapter(base, {"request_id": request_id})
        deadline = time.monotonic() + timeout if timeout is not None else None
        return cls(log=adapter, request_id=request_id, deadline=deadline)

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()


class ZipcodeLookup(Protocol):
    """Resolves a postal code to its locality."""

    def find(self, code: PostalCode, context: Optional[RequestContext] = None) -> LocalityRecord:
        """Raise ``ZipcodeNotFound`` for unknown codes, ``ProviderError`` otherwise."""
        ...


class WeatherProvider(Protocol):
    """A data source capable of returning current weather for a place name."""

    def fetch_current(self, query: str, context: Optional[RequestContext] = None) -> WeatherRecord:
        """Raise ``ProviderError`` on any failure."""
        ...


__all__ = [
    "CurrentConditions",
    "Location",
    "LocalityRecord",
    "RequestContext",
    "WeatherProvider",
    "WeatherRecord",
    "ZipcodeLookup",
]
