from __future__ import annotations

import logging
import math
from typing import List, Optional

import pytest

from core.abstractions import CurrentConditions, LocalityRecord, RequestContext, WeatherRecord
from core.entities import Celsius, Fahrenheit, Kelvin, PostalCode, ValidationError
from core.providers.base import ProviderError, ZipcodeNotFound
from core.services.weather import FailureKind, WeatherByPostalCode, WeatherLookupError


class _FakeZipcodeLookup:
    def __init__(self, locality: str = "São Paulo", error: Optional[Exception] = None) -> None:
        self.locality = locality
        self.error = error
        self.calls: List[PostalCode] = []
        self.contexts: List[Optional[RequestContext]] = []

    def find(self, code: PostalCode, context: Optional[RequestContext] = None) -> LocalityRecord:
        self.calls.append(code)
        self.contexts.append(context)
        if self.error is not None:
            raise self.error
        return LocalityRecord(cep=str(code), locality=self.locality, state="SP")


class _FakeWeatherProvider:
    def __init__(self, temp_c: float = 25.0, error: Optional[Exception] = None) -> None:
        self.temp_c = temp_c
        self.error = error
        self.queries: List[str] = []

    def fetch_current(self, query: str, context: Optional[RequestContext] = None) -> WeatherRecord:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return WeatherRecord(current=CurrentConditions(temp_c=self.temp_c))


def _run(raw: str, zipcode=None, weather=None):
    zipcode = zipcode or _FakeZipcodeLookup()
    weather = weather or _FakeWeatherProvider()
    service = WeatherByPostalCode(zipcode, weather)
    return service.execute(raw), zipcode, weather


def _failure(raw: str, zipcode=None, weather=None) -> WeatherLookupError:
    with pytest.raises(WeatherLookupError) as excinfo:
        _run(raw, zipcode, weather)
    return excinfo.value


def test_returns_all_three_scales() -> None:
    report, zipcode, weather = _run("01001000")

    assert report.celsius == Celsius(25.0)
    assert report.fahrenheit == Fahrenheit(77.0)
    assert report.kelvin.value == pytest.approx(298.15)
    assert all(t.is_valid for t in (report.celsius, report.fahrenheit, report.kelvin))
    assert zipcode.calls == [PostalCode("01001000")]
    assert weather.queries == ["São Paulo"]


def test_report_as_dict() -> None:
    report, _, _ = _run("01001000")

    assert report.as_dict() == {"temp_C": 25.0, "temp_F": 77.0, "temp_K": pytest.approx(298.2, abs=0.1)}


def test_invalid_zipcode_skips_network() -> None:
    zipcode = _FakeZipcodeLookup()
    weather = _FakeWeatherProvider()

    error = _failure("123", zipcode, weather)

    assert error.kind is FailureKind.INVALID_ZIPCODE
    assert isinstance(error.cause, ValidationError)
    assert zipcode.calls == []
    assert weather.queries == []


def test_raw_code_is_trimmed_before_lookup() -> None:
    _, zipcode, _ = _run("  22041001 ")

    assert [str(code) for code in zipcode.calls] == ["22041001"]


def test_zipcode_not_found() -> None:
    weather = _FakeWeatherProvider()
    error = _failure("01001000", _FakeZipcodeLookup(error=ZipcodeNotFound("nope")), weather)

    assert error.kind is FailureKind.ZIPCODE_NOT_FOUND
    assert weather.queries == []


@pytest.mark.parametrize("locality", ["", "   ", "\t"])
def test_empty_locality_is_not_found(locality: str) -> None:
    weather = _FakeWeatherProvider()
    error = _failure("01001000", _FakeZipcodeLookup(locality=locality), weather)

    assert error.kind is FailureKind.ZIPCODE_NOT_FOUND
    assert weather.queries == []


def test_locality_is_trimmed_before_weather_lookup() -> None:
    _, _, weather = _run("01001000", zipcode=_FakeZipcodeLookup(locality="  Rio de Janeiro \n"))

    assert weather.queries == ["Rio de Janeiro"]


def test_lookup_failure_keeps_cause() -> None:
    cause = ProviderError("timeout")
    error = _failure("01001000", _FakeZipcodeLookup(error=cause))

    assert error.kind is FailureKind.UPSTREAM_LOOKUP_FAILURE
    assert error.cause is cause
    assert error.__cause__ is cause


def test_weather_failure_keeps_cause() -> None:
    cause = ProviderError("unexpected status: 500")
    error = _failure("01001000", weather=_FakeWeatherProvider(error=cause))

    assert error.kind is FailureKind.UPSTREAM_WEATHER_FAILURE
    assert error.cause is cause


@pytest.mark.parametrize("temp_c", [-300.0, math.nan, math.inf])
def test_non_physical_temperature_is_rejected(temp_c: float) -> None:
    error = _failure("01001000", weather=_FakeWeatherProvider(temp_c=temp_c))

    assert error.kind is FailureKind.INVALID_UPSTREAM_TEMPERATURE
    assert isinstance(error.cause, ValidationError)


def test_overflowing_conversion_is_rejected() -> None:
    error = _failure("01001000", weather=_FakeWeatherProvider(temp_c=1e308))

    assert error.kind is FailureKind.INVALID_UPSTREAM_TEMPERATURE
    assert "fahrenheit" in str(error)


def test_absolute_zero_celsius_fails_fahrenheit_revalidation() -> None:
    # -273.15 °C converts to -459.7 °F after rounding, just under the floor.
    error = _failure("01001000", weather=_FakeWeatherProvider(temp_c=-273.15))

    assert error.kind is FailureKind.INVALID_UPSTREAM_TEMPERATURE
    assert "fahrenheit" in str(error)


def test_context_is_passed_to_ports() -> None:
    zipcode = _FakeZipcodeLookup()
    service = WeatherByPostalCode(zipcode, _FakeWeatherProvider())
    context = RequestContext.create(logger=logging.getLogger("test"), timeout=5.0)

    service.execute("01001000", context)

    assert zipcode.contexts == [context]


def test_service_can_be_reused() -> None:
    service = WeatherByPostalCode(_FakeZipcodeLookup(), _FakeWeatherProvider(temp_c=10.0))

    first = service.execute("01001000")
    second = service.execute("22041001")

    assert first.celsius == second.celsius == Celsius(10.0)
    assert first.kelvin == second.kelvin == Kelvin(283.15)
