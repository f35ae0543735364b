"""Development settings.

Extends the base settings with debug mode, open hosts, a console email
backend and an in-process cache so no redis is needed locally. Do not use
these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Use console email backend during development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

LOGGING['loggers']['apps']['level'] = 'DEBUG'  # noqa: F405
