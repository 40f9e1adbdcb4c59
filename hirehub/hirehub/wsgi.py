"""
WSGI config for hirehub project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "hirehub.settings")

application = get_wsgi_application()
