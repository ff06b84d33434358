from .base import *
import os

DEBUG = True

# Database configuration - use PostgreSQL if environment variables are set, otherwise SQLite
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.getenv('DATABASE_NAME', 'budget_tracker_db'),
        'USER': os.getenv('DATABASE_USER', 'budget_tracker_user'),
        'PASSWORD': os.getenv('DATABASE_PASSWORD', 'budget_tracker_password'),
        'HOST': os.getenv('DATABASE_HOST', 'db'),
        'PORT': os.getenv('DATABASE_PORT', '5432'),
    }
}

# Fallback to SQLite if DATABASE_HOST is not set (for local development without Docker)
if not os.getenv('DATABASE_HOST') or os.getenv('DATABASE_HOST') == 'localhost':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

ALLOWED_HOSTS = ["*"]

# Browsable API is handy while developing
REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    'DEFAULT_RENDERER_CLASSES': (
        'rest_framework.renderers.JSONRenderer',
        'rest_framework.renderers.BrowsableAPIRenderer',
    ),
}

LOG_LEVEL = 'DEBUG'
for _app in ('core', 'accounts', 'projects', 'expenses'):
    LOGGING['loggers'][_app]['level'] = LOG_LEVEL
