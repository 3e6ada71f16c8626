"""WSGI config for the sundays_chicken project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "sundays_chicken.settings")

application = get_wsgi_application()
