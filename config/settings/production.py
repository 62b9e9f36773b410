"""
Django Production Settings

Every secret the API and the report jobs depend on is read without a default,
so a misconfigured deploy fails at startup instead of on the first cron run.
"""
from copy import deepcopy

from .base import *  # noqa: F401, F403

DEBUG = False

ALLOWED_HOSTS = config('ALLOWED_HOSTS', cast=Csv())  # noqa: F405

# =============================================================================
# Required secrets
# =============================================================================

SECRET_KEY = config('DJANGO_SECRET_KEY')  # noqa: F405
SUPABASE_URL = config('NEXT_PUBLIC_SUPABASE_URL')  # noqa: F405
SUPABASE_SERVICE_ROLE_KEY = config('SUPABASE_SERVICE_ROLE_KEY')  # noqa: F405
SUPABASE_JWT_SECRET = config('SUPABASE_JWT_SECRET')  # noqa: F405
CRON_SECRET = config('CRON_SECRET')  # noqa: F405
APP_URL = config('APP_URL')  # noqa: F405

# =============================================================================
# Security
# =============================================================================

SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'
SECURE_SSL_REDIRECT = config('SECURE_SSL_REDIRECT', default=True, cast=bool)  # noqa: F405
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

# /api/health is probed over plain HTTP by the platform load balancer
SECURE_REDIRECT_EXEMPT = [r'^api/health$']

CORS_ALLOWED_ORIGINS = config('CORS_ALLOWED_ORIGINS', cast=Csv())  # noqa: F405
CORS_ALLOW_ALL_ORIGINS = False

DATABASES['default']['OPTIONS']['sslmode'] = 'require'  # noqa: F405

# =============================================================================
# Logging - job summaries and delivery failures only
# =============================================================================

LOGGING = deepcopy(LOGGING)  # noqa: F405
LOGGING['root']['level'] = 'INFO'
LOGGING['loggers']['django']['level'] = 'WARNING'
LOGGING['loggers']['apps']['level'] = 'INFO'
