"""Base settings for all environments.

This configuration file defines the common settings used by the development,
production and test environments. It follows Django's standard configuration
structure and integrates Celery and structlog. Environment-specific settings
are overridden in `dev.py`, `prod.py` or `test.py`.
"""

import os
from pathlib import Path

import structlog
from dotenv import load_dotenv

from shared.infrastructure.log_processors import scrub_sensitive_data

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Optional .env at the project root
load_dotenv(BASE_DIR / '.env')


def env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'replace-me-in-production')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = False

ALLOWED_HOSTS: list[str] = os.environ.get('DJANGO_ALLOWED_HOSTS', '*').split(',')

# Application definition

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    # Domain apps
    'apps.catalog',
    'apps.guests',
    'apps.bookings',
    'apps.notifications',
]

# Database
# https://docs.djangoproject.com/en/5.0/ref/settings/#databases

DATABASES = {
    'default': {
        'ENGINE': os.environ.get('DB_ENGINE', 'django.db.backends.sqlite3'),
        'NAME': os.environ.get('DB_NAME', BASE_DIR / 'db.sqlite3'),
        'USER': os.environ.get('DB_USER', ''),
        'PASSWORD': os.environ.get('DB_PASSWORD', ''),
        'HOST': os.environ.get('DB_HOST', ''),
        'PORT': os.environ.get('DB_PORT', ''),
    }
}

# Internationalization
# https://docs.djangoproject.com/en/5.0/topics/i18n/

LANGUAGE_CODE = 'en'

TIME_ZONE = 'UTC'

USE_I18N = True

USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Email defaults
DEFAULT_FROM_EMAIL = os.environ.get('DEFAULT_FROM_EMAIL', 'no-reply@bookings.local')

# Pricing: rates in [0, 1]; invalid values fall back to the defaults in
# apps.pricing.config (10% tax, 20% deposit)
PRICING = {
    'TAX_RATE': os.environ.get('TAX_RATE'),
    'DEPOSIT_RATE': os.environ.get('DEPOSIT_RATE'),
    'TOLERANCE': os.environ.get('PRICING_TOLERANCE', '0.01'),
    'STRICT_VALIDATION': env_bool('PRICING_STRICT_VALIDATION', True),
}

BOOKINGS = {
    'HOLD_HOURS': int(os.environ.get('BOOKING_HOLD_HOURS', 24)),
    'DEFAULT_LOCALE': os.environ.get('BOOKING_DEFAULT_LOCALE', 'en'),
    'SUPPORTED_LOCALES': ['en', 'fr'],
}

NOTIFICATIONS = {
    'EMAIL_ENABLED': env_bool('NOTIFICATIONS_EMAIL_ENABLED', True),
    'SMS_ENABLED': env_bool('NOTIFICATIONS_SMS_ENABLED', False),
    'SMS_GATEWAY_URL': os.environ.get('SMS_GATEWAY_URL', ''),
    'SMS_GATEWAY_TOKEN': os.environ.get('SMS_GATEWAY_TOKEN', ''),
    'SMS_SENDER': os.environ.get('SMS_SENDER', 'Bookings'),
    'SMS_TIMEOUT': float(os.environ.get('SMS_TIMEOUT', 10)),
    'SUBJECT_PREFIX': os.environ.get('NOTIFICATIONS_SUBJECT_PREFIX', ''),
}

# Celery configuration (Broker and Result backend handled in environment).
# No beat schedule: expiration sweeping is triggered externally through
# the bookings.expire_pending_bookings task.
CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = os.environ.get('CELERY_RESULT_BACKEND', 'redis://localhost:6379/0')
CELERY_TASK_SERIALIZER = 'json'
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TIMEZONE = TIME_ZONE

# Structured logging
structlog.configure(
    processors=[
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "structlog.stdlib.ProcessorFormatter",
            "processors": [
                scrub_sensitive_data,
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
            "foreign_pre_chain": [
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
            ],
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "level": LOG_LEVEL,
        }
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "django": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "apps": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "shared": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
