"""Test settings.

In-memory SQLite, locmem e-mail and eager Celery so tests run without
external services.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

PRICING = {
    'TAX_RATE': '0.1',
    'DEPOSIT_RATE': '0.2',
    'TOLERANCE': '0.01',
    'STRICT_VALIDATION': True,
}

BOOKINGS = {
    'HOLD_HOURS': 24,
    'DEFAULT_LOCALE': 'en',
    'SUPPORTED_LOCALES': ['en', 'fr'],
}

NOTIFICATIONS = {
    'EMAIL_ENABLED': True,
    'SMS_ENABLED': False,
    'SMS_GATEWAY_URL': '',
    'SMS_GATEWAY_TOKEN': '',
    'SMS_SENDER': 'Bookings',
    'SMS_TIMEOUT': 5,
    'SUBJECT_PREFIX': '',
}
