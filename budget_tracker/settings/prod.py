from .base import *
import os

DEBUG = False

# Database configuration - PostgreSQL for production
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.getenv('DATABASE_NAME', 'budget_tracker_db'),
        'USER': os.getenv('DATABASE_USER', 'budget_tracker_user'),
        'PASSWORD': os.getenv('DATABASE_PASSWORD', 'budget_tracker_password'),
        'HOST': os.getenv('DATABASE_HOST', 'db'),
        'PORT': os.getenv('DATABASE_PORT', '5432'),
        'OPTIONS': {
            'connect_timeout': 10,
        }
    }
}

# Security settings for production
ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', '*').split(',')

# Static files
STATIC_ROOT = '/app/staticfiles'

# Security
SECURE_SSL_REDIRECT = os.getenv('SECURE_SSL_REDIRECT', 'False').lower() == 'true'
SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'False').lower() == 'true'
CSRF_COOKIE_SECURE = os.getenv('CSRF_COOKIE_SECURE', 'False').lower() == 'true'
