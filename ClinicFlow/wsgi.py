"""
WSGI config for ClinicFlow project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ClinicFlow.settings")

application = get_wsgi_application()
