"""
Django Test Settings for Flow Backend

Uses SQLite in-memory database for fast testing.
The test conftest flips managed=False models so Django creates their tables.
"""
from .base import *  # noqa: F401, F403

# =============================================================================
# Debug Mode for Tests
# =============================================================================

DEBUG = False

ALLOWED_HOSTS = ['*']

# =============================================================================
# Database - In-memory SQLite
# =============================================================================

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# =============================================================================
# Speed Optimizations for Tests
# =============================================================================

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# Disable logging during tests
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'CRITICAL',
    },
}

# =============================================================================
# REST Framework Test Settings
# =============================================================================

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    'DEFAULT_THROTTLE_RATES': {
        'invites': '1000/minute',
        'uploads': '1000/minute',
    },
}

# =============================================================================
# Supabase Mock Configuration
# =============================================================================

SUPABASE_URL = 'http://localhost:54321'
SUPABASE_ANON_KEY = 'test-anon-key'
SUPABASE_SERVICE_ROLE_KEY = 'test-service-role-key'
SUPABASE_JWT_SECRET = 'test-jwt-secret-key-for-testing-purposes-only'

# Cron authentication secret for testing
CRON_SECRET = 'test-cron-secret'

# =============================================================================
# Outbound Integrations
# =============================================================================

DISCORD_WEBHOOK_URL = 'https://discord.test/api/webhooks/scoreboard'
RESEND_API_KEY = 'test-resend-key'

# =============================================================================
# CORS - Allow all for tests
# =============================================================================

CORS_ALLOW_ALL_ORIGINS = True
