"""REST API views for weather by postal code."""
from __future__ import annotations

import time
from functools import lru_cache

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api.middleware import request_logger
from core.abstractions import RequestContext
from core.providers.base import RequestConfig
from core.providers.viacep import ViaCEPClient
from core.providers.weatherapi import WeatherAPIClient
from core.services.weather import FailureKind, WeatherByPostalCode, WeatherLookupError

# Failure kinds the caller is told about; everything else is a 500.
_CLIENT_ERRORS = {
    FailureKind.INVALID_ZIPCODE: (status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid zipcode"),
    FailureKind.ZIPCODE_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "cannot find zipcode"),
}


@lru_cache(maxsize=1)
def get_weather_service() -> WeatherByPostalCode:
    zipcode = ViaCEPClient(
        base_url=settings.VIACEP_URL,
        return_type=settings.VIACEP_RETURN_TYPE,
        request_config=RequestConfig(timeout=settings.VIACEP_TIMEOUT),
    )
    weather = WeatherAPIClient(
        api_key=settings.WEATHER_API_KEY,
        base_url=settings.WEATHER_URL,
        request_config=RequestConfig(timeout=settings.WEATHER_TIMEOUT),
    )
    return WeatherByPostalCode(zipcode, weather)


def _error(status_code: int, message: str) -> Response:
    return Response({"error": message}, status=status_code)


class WeatherView(APIView):
    """Current temperature for a CEP in Celsius, Fahrenheit and Kelvin."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return the temperatures for the ``cep`` query parameter."""
        log = request_logger(request)
        cep = request.query_params.get("cep") or ""
        if not cep:
            log.warning("missing cep query parameter query=%s", request.META.get("QUERY_STRING", ""))
            return _error(status.HTTP_400_BAD_REQUEST, "missing query parameter: cep")

        context = RequestContext(
            log=log,
            request_id=getattr(request, "request_id", ""),
            deadline=time.monotonic() + settings.HTTP_TIMEOUT,
        )
        try:
            report = get_weather_service().execute(cep, context)
        except WeatherLookupError as exc:
            if exc.kind in _CLIENT_ERRORS:
                status_code, message = _CLIENT_ERRORS[exc.kind]
                log.warning("request rejected cep=%s kind=%s", cep, exc.kind.value)
                return _error(status_code, message)
            log.error("unexpected failure cep=%s kind=%s error=%s", cep, exc.kind.value, exc)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal error")

        return Response(report.as_dict(), status=status.HTTP_200_OK)
