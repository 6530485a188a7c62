"""
This configuration file overrides some necessary configs
to easily develop the app.
"""

from .base import *  # noqa

INSTALLED_APPS += [  # NOQA
    "django.contrib.staticfiles",  # for Swagger UI assets in local & develop
]

DEBUG = config("DEBUG", default=True, cast=bool)  # NOQA

ALLOWED_HOSTS = ["*"]

INTERNAL_IPS = ["127.0.0.1"]

STATIC_URL = "static/"
