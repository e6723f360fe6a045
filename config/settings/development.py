"""
StockLedger: Development Settings

Local development overrides. Activated by:
  DJANGO_SETTINGS_MODULE=config.settings.development

@file config/settings/development.py
"""

from .base import *  # noqa: F401, F403

DEBUG = True

ALLOWED_HOSTS = ['*']

INSTALLED_APPS += [  # noqa: F405
    'django_extensions',
]

CORS_ALLOW_ALL_ORIGINS = True

LOGGING['loggers']['stockledger']['level'] = 'DEBUG'  # noqa: F405
