"""Core Django settings shared by every environment."""

from pathlib import Path

from decouple import Csv, config

BASE_DIR = Path(__file__).resolve().parent.parent.parent

ENVIRONMENT = config("ENVIRONMENT", default="local")

SECRET_KEY = config("SECRET_KEY", default="django-insecure-zk-attendance-gateway")

DEBUG = config("DEBUG", default=False, cast=bool)

LOG_LEVEL = config("LOG_LEVEL", default="INFO")

ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="*", cast=Csv())

ROOT_URLCONF = "urls"

WSGI_APPLICATION = "wsgi.application"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
