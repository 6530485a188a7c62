"""
This configuration file overrides some necessary configs
to deploy the app to the develop environment.
"""

from decouple import Csv

from .base import *  # noqa
from .base import config

INSTALLED_APPS += [  # NOQA
    "django.contrib.staticfiles",  # for Swagger UI assets in local & develop
]

ALLOWED_HOSTS = config("ALLOWED_HOSTS", cast=Csv())

STATIC_URL = "static/"
STATIC_ROOT = "staticfiles"
