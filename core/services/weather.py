from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..abstractions import RequestContext, WeatherProvider, ZipcodeLookup
from ..entities import Celsius, Fahrenheit, Kelvin, PostalCode, ValidationError
from ..providers.base import ProviderError, ZipcodeNotFound


class FailureKind(str, Enum):
    INVALID_ZIPCODE = "invalid_zipcode"
    ZIPCODE_NOT_FOUND = "zipcode_not_found"
    UPSTREAM_LOOKUP_FAILURE = "upstream_lookup_failure"
    UPSTREAM_WEATHER_FAILURE = "upstream_weather_failure"
    INVALID_UPSTREAM_TEMPERATURE = "invalid_upstream_temperature"


class WeatherLookupError(RuntimeError):
    """Raised by :class:`WeatherByPostalCode` with the stage that failed.

    ``cause`` keeps the underlying exception for logs; it is never meant to
    reach the API caller.
    """

    def __init__(self, kind: FailureKind, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.cause = cause


@dataclass(frozen=True)
class WeatherReport:
    celsius: Celsius
    fahrenheit: Fahrenheit
    kelvin: Kelvin

    def as_dict(self) -> Dict[str, Optional[float]]:
        return {
            "temp_C": self.celsius.serialize(),
            "temp_F": self.fahrenheit.serialize(),
            "temp_K": self.kelvin.serialize(),
        }


class WeatherByPostalCode:
    """Postal code -> locality -> current weather, in three scales.

    A single pass without retries: the first failing stage ends the run with
    a :class:`WeatherLookupError`. The instance holds no per-request state
    and can be shared between concurrent requests.
    """

    def __init__(
        self,
        zipcode_lookup: ZipcodeLookup,
        weather_provider: WeatherProvider,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.zipcode_lookup = zipcode_lookup
        self.weather_provider = weather_provider
        self._log = logger or logging.getLogger(self.__class__.__name__)

    def execute(self, raw_postal_code: str, context: Optional[RequestContext] = None) -> WeatherReport:
        log = context.log if context is not None else self._log

        try:
            code = PostalCode(raw_postal_code)
        except ValidationError as exc:
            raise WeatherLookupError(FailureKind.INVALID_ZIPCODE, "invalid zipcode", exc) from exc

        try:
            locality = self.zipcode_lookup.find(code, context)
        except ZipcodeNotFound as exc:
            raise WeatherLookupError(FailureKind.ZIPCODE_NOT_FOUND, "cannot find zipcode", exc) from exc
        except ProviderError as exc:
            raise WeatherLookupError(
                FailureKind.UPSTREAM_LOOKUP_FAILURE, f"zipcode lookup failed: {exc}", exc
            ) from exc

        city = (locality.locality or "").strip()
        if not city:
            log.info("zipcode %s resolved to an empty locality", code)
            raise WeatherLookupError(FailureKind.ZIPCODE_NOT_FOUND, "cannot find zipcode")

        try:
            weather = self.weather_provider.fetch_current(city, context)
        except ProviderError as exc:
            raise WeatherLookupError(
                FailureKind.UPSTREAM_WEATHER_FAILURE, f"weather provider failed: {exc}", exc
            ) from exc

        try:
            celsius = Celsius(weather.current.temp_c)
        except ValidationError as exc:
            raise WeatherLookupError(
                FailureKind.INVALID_UPSTREAM_TEMPERATURE,
                f"weather provider returned invalid celsius temperature: {exc}",
                exc,
            ) from exc
        try:
            fahrenheit = Fahrenheit(celsius.to_fahrenheit())
        except ValidationError as exc:
            raise WeatherLookupError(
                FailureKind.INVALID_UPSTREAM_TEMPERATURE, f"invalid fahrenheit conversion: {exc}", exc
            ) from exc
        try:
            kelvin = Kelvin(celsius.to_kelvin())
        except ValidationError as exc:
            raise WeatherLookupError(
                FailureKind.INVALID_UPSTREAM_TEMPERATURE, f"invalid kelvin conversion: {exc}", exc
            ) from exc

        log.info("weather for zipcode %s (%s): %s", code, city, celsius)
        return WeatherReport(celsius=celsius, fahrenheit=fahrenheit, kelvin=kelvin)


__all__ = ["FailureKind", "WeatherByPostalCode", "WeatherLookupError", "WeatherReport"]
