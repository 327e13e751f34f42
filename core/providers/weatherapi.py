from __future__ import annotations

from typing import Any, Optional

from .base import HTTPProvider, ProviderError
from ..abstractions import CurrentConditions, Location, RequestContext, WeatherRecord


def _safe_float(value: Optional[object]) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class WeatherAPIClient(HTTPProvider):
    name = "weatherapi"
    default_base_url = "https://api.weatherapi.com/v1"

    def __init__(self, api_key: str, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(base_url or self.default_base_url, **kwargs)
        self.api_key = api_key

    def fetch_current(self, query: str, context: Optional[RequestContext] = None) -> WeatherRecord:
        log = self._logger(context)
        if not self.api_key:
            log.error("weatherapi: missing api key query=%s", query)
            raise ProviderError("missing api key")
        query = (query or "").strip()
        if not query:
            log.warning("weatherapi: empty query parameter")
            raise ProviderError("empty query parameter")

        response = self._request(
            "GET",
            f"{self.base_url}/current.json",
            context,
            params={"key": self.api_key, "q": query},
        )
        if response.status_code != 200:
            log.error("weatherapi: unexpected status query=%s status=%s", query, response.status_code)
            raise ProviderError(f"unexpected status: {response.status_code}")

        data = self._json(response, log)
        try:
            record = self._parse(data)
        except ProviderError:
            log.error("weatherapi: unexpected payload query=%s", query)
            raise
        if record is None:
            log.error("weatherapi: missing current temperature query=%s", query)
            raise ProviderError("missing current temperature")
        log.info("weatherapi: lookup succeeded query=%s temp_c=%s", query, record.current.temp_c)
        return record

    # helpers ------------------------------------------------------------
    def _parse(self, data: Any) -> Optional[WeatherRecord]:
        if not isinstance(data, dict):
            return None
        current = data.get("current")
        if not isinstance(current, dict):
            return None
        temp_c = _safe_float(current.get("temp_c"))
        if temp_c is None:
            return None
        location = data.get("location") or {}
        condition = current.get("condition") or {}
        if not (isinstance(location, dict) and isinstance(condition, dict)):
            raise ProviderError("unexpected payload")
        return WeatherRecord(
            current=CurrentConditions(
                temp_c=temp_c,
                temp_f=_safe_float(current.get("temp_f")),
                condition=str(condition.get("text") or ""),
                last_updated=str(current.get("last_updated") or ""),
            ),
            location=Location(
                name=str(location.get("name") or ""),
                region=str(location.get("region") or ""),
                country=str(location.get("country") or ""),
            ),
        )


__all__ = ["WeatherAPIClient"]
