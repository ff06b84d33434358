"""
WSGI config for the budget tracker API.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'budget_tracker.settings.prod')

application = get_wsgi_application()
