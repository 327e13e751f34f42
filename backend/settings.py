"""Django settings for the CEP weather service."""
from __future__ import annotations

import os
from pathlib import Path

from backend.config import env, env_duration, env_or_default, load_env_file

BASE_DIR = Path(__file__).resolve().parent.parent

load_env_file(BASE_DIR / ".env")

SECRET_KEY = env("DJANGO_SECRET_KEY")
DEBUG = os.environ.get("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "backend.api",
]

MIDDLEWARE = [
    "backend.api.middleware.RequestLoggingMiddleware",
    "backend.api.middleware.RecoveryMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "backend.urls"

WSGI_APPLICATION = "backend.wsgi.application"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

DATABASES = {}

# Service --------------------------------------------------------------------
HTTP_PORT = env_or_default("PORT", "8080")
HTTP_TIMEOUT = env_duration("HTTP_TIMEOUT", 5.0)

VIACEP_URL = os.environ.get("VIACEP_URL", "https://viacep.com.br/ws").rstrip("/")
VIACEP_RETURN_TYPE = env_or_default("VIACEP_RETURN_TYPE", "json")
VIACEP_TIMEOUT = env_duration("VIACEP_TIMEOUT", 5.0)

WEATHER_URL = os.environ.get("WEATHER_URL", "https://api.weatherapi.com/v1").rstrip("/")
WEATHER_API_KEY = env_or_default("WEATHER_API_KEY", "default_key")
WEATHER_TIMEOUT = env_duration("WEATHER_TIMEOUT", 5.0)

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
}

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_id": {"()": "backend.api.middleware.RequestIdFilter"},
    },
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "filters": ["request_id"],
            "formatter": "default",
        },
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True
