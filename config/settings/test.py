"""
StockLedger: Test Settings

Used by pytest (see pyproject.toml). Each test binds its own ledger to a
temporary snapshot; the default file below is never written.

@file config/settings/test.py
"""

import tempfile
from pathlib import Path

from .base import *  # noqa: F401, F403

DEBUG = False

ALLOWED_HOSTS = ['testserver']

SECRET_KEY = 'test-secret-key'

LEDGER_DATA_FILE = Path(tempfile.gettempdir()) / 'stockledger-test' / 'inventory.json'

REST_FRAMEWORK['DEFAULT_RENDERER_CLASSES'] = (  # noqa: F405
    'core.renderers.StandardJSONRenderer',
)

# Let pytest's caplog see application records.
LOGGING['loggers']['stockledger']['propagate'] = True  # noqa: F405
LOGGING['loggers']['stockledger']['handlers'] = []  # noqa: F405
