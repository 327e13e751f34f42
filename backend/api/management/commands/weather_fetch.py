"""Management command to fetch weather using the same stack as the API."""
from __future__ import annotations

import json
import logging
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from backend.api.views import get_weather_service
from core.abstractions import RequestContext
from core.services.weather import WeatherLookupError


class Command(BaseCommand):
    help = "Fetch current temperatures for the provided CEP"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--cep", type=str, required=True, help="Postal code, eight digits")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        context = RequestContext.create(
            logger=logging.getLogger(__name__),
            timeout=settings.HTTP_TIMEOUT,
        )
        try:
            report = get_weather_service().execute(options["cep"], context)
        except WeatherLookupError as exc:
            raise CommandError(f"{exc.kind.value}: {exc}") from exc

        self.stdout.write(json.dumps(report.as_dict()))
