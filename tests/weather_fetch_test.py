from __future__ import annotations

import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from backend.api.management.commands import weather_fetch
from core.abstractions import CurrentConditions, LocalityRecord, WeatherRecord
from core.providers.base import ProviderError
from core.services.weather import WeatherByPostalCode


class _Lookup:
    def find(self, code, context=None):
        return LocalityRecord(cep=str(code), locality="Recife")


class _Weather:
    def __init__(self, temp_c: float = 30.0, error=None) -> None:
        self.temp_c = temp_c
        self.error = error

    def fetch_current(self, query, context=None):
        if self.error is not None:
            raise self.error
        return WeatherRecord(current=CurrentConditions(temp_c=self.temp_c))


def test_command_prints_payload(monkeypatch) -> None:
    service = WeatherByPostalCode(_Lookup(), _Weather(temp_c=30.0))
    monkeypatch.setattr(weather_fetch, "get_weather_service", lambda: service)
    out = StringIO()

    call_command("weather_fetch", "--cep", "50010000", stdout=out)

    payload = json.loads(out.getvalue())
    assert payload["temp_C"] == 30.0
    assert payload["temp_F"] == 86.0
    assert payload["temp_K"] == pytest.approx(303.2, abs=0.1)


def test_command_reports_failure_kind(monkeypatch) -> None:
    service = WeatherByPostalCode(_Lookup(), _Weather(error=ProviderError("timeout")))
    monkeypatch.setattr(weather_fetch, "get_weather_service", lambda: service)

    with pytest.raises(CommandError, match="upstream_weather_failure"):
        call_command("weather_fetch", "--cep", "50010000", stdout=StringIO())


def test_command_rejects_invalid_cep(monkeypatch) -> None:
    service = WeatherByPostalCode(_Lookup(), _Weather())
    monkeypatch.setattr(weather_fetch, "get_weather_service", lambda: service)

    with pytest.raises(CommandError, match="invalid_zipcode"):
        call_command("weather_fetch", "--cep", "11111111", stdout=StringIO())
