"""
Django Development Settings

Local Flow backend talking to a local Supabase stack (`supabase start`) and the
Next.js dev server on port 3000.
"""
from copy import deepcopy

from .base import *  # noqa: F401, F403

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# =============================================================================
# Supabase - local stack defaults
# =============================================================================

SUPABASE_URL = SUPABASE_URL or 'http://127.0.0.1:54321'  # noqa: F405

DATABASES['default']['OPTIONS']['sslmode'] = config(  # noqa: F405
    'SUPABASE_DB_SSLMODE',
    default='disable'
)

# =============================================================================
# Cron - a fixed secret so the jobs can be triggered by hand:
#   curl -H 'X-Cron-Secret: dev-cron-secret' \
#        'localhost:8000/api/cron/daily-leaderboard?dry=1&force=1'
# =============================================================================

CRON_SECRET = CRON_SECRET or 'dev-cron-secret'  # noqa: F405

# Outbound calls fail fast against local mocks
OUTBOUND_HTTP_TIMEOUT = config('OUTBOUND_HTTP_TIMEOUT', default=5.0, cast=float)  # noqa: F405

REST_FRAMEWORK = deepcopy(REST_FRAMEWORK)  # noqa: F405
REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {
    'invites': '1000/hour',
    'uploads': '1000/hour',
}

CORS_ALLOWED_ORIGINS = [
    'http://localhost:3000',
    'http://127.0.0.1:3000',
]

# =============================================================================
# Logging - report job details in the console
# =============================================================================

LOGGING = deepcopy(LOGGING)  # noqa: F405
LOGGING['root']['level'] = 'DEBUG'
LOGGING['loggers']['django']['level'] = 'INFO'
LOGGING['loggers']['apps']['level'] = 'DEBUG'
