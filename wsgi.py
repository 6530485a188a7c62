"""
WSGI config for the ZK attendance gateway.

It exposes the WSGI callable as a module-level variable named ``application``.

The realtime event stream holds its worker thread for the lifetime of the
client connection, so serve it with a threaded worker class (e.g. gunicorn
``--worker-class gthread``).

For more information on this file, see
https://docs.djangoproject.com/en/5.1/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "settings")

application = get_wsgi_application()
