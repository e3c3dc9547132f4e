"""
Test settings for bakery_server project.
"""

from .base import *  # noqa: F401,F403

# Use SQLite for testing
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}


# Disable migrations for faster testing
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()

# Use faster password hasher for testing
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# Disable logging during tests
LOGGING_CONFIG = None

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

# No sleeping between order number retries
ORDER_NUMBER_BACKOFF_MS = 0

NGENIUS_API_KEY = 'test-api-key'
NGENIUS_API_URL = 'https://gateway.test'
NGENIUS_OUTLET_REF = 'test-outlet'
FRONTEND_URL = 'https://shop.test'
