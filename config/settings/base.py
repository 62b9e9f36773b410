"""
Django Base Settings for Flow Backend

This file contains all shared settings used across environments.
Environment-specific settings are in development.py, production.py and test.py.
"""
from pathlib import Path

from decouple import Csv, config

# Build paths inside the project like this: BASE_DIR / 'subdir'
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# =============================================================================
# Core Settings
# =============================================================================

SECRET_KEY = config('DJANGO_SECRET_KEY', default='django-insecure-change-me-in-production')

DEBUG = config('DJANGO_DEBUG', default=True, cast=bool)

ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1', cast=Csv())

# =============================================================================
# Application Definition
# =============================================================================

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'django.contrib.staticfiles',

    'rest_framework',
    'corsheaders',

    # Local apps
    'apps.core',
    'apps.agents',      # Profiles, invites, avatar uploads
    'apps.deals',       # Deal entry and deal house
    'apps.follow_ups',  # Follow-up reminders
    'apps.debt_cases',  # Debt management workflow
    'apps.carriers',    # Carriers, products and comp tables
    'apps.analytics',   # Range analytics
    'apps.dashboard',   # Dashboard, leaderboard, my agency
    'apps.reports',     # Cron-triggered scoreboards
    'apps.webhooks',    # Deal-posted Discord webhook
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'apps.core.middleware.SupabaseAuthMiddleware',
]

ROOT_URLCONF = 'config.urls'

WSGI_APPLICATION = 'config.wsgi.application'

# =============================================================================
# Database
# Connects to existing Supabase PostgreSQL - no migrations run
# =============================================================================

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': config('SUPABASE_DB_NAME', default='postgres'),
        'USER': config('SUPABASE_DB_USER', default='postgres'),
        'PASSWORD': config('SUPABASE_DB_PASSWORD', default=''),
        'HOST': config('SUPABASE_DB_HOST', default='localhost'),
        'PORT': config('SUPABASE_DB_PORT', default='5432'),
        'OPTIONS': {
            'sslmode': config('SUPABASE_DB_SSLMODE', default='require'),
        },
    }
}

# =============================================================================
# Supabase Configuration
# =============================================================================

SUPABASE_URL = config('NEXT_PUBLIC_SUPABASE_URL', default='')
SUPABASE_ANON_KEY = config('NEXT_PUBLIC_SUPABASE_ANON_KEY', default='')
SUPABASE_SERVICE_ROLE_KEY = config('SUPABASE_SERVICE_ROLE_KEY', default='')
SUPABASE_JWT_SECRET = config('SUPABASE_JWT_SECRET', default='')

AVATAR_BUCKET = config('AVATAR_BUCKET', default='avatars')

# Cron authentication secret (shared with the scheduler)
CRON_SECRET = config('CRON_SECRET', default='')

# =============================================================================
# Outbound Integrations
# =============================================================================

DISCORD_WEBHOOK_URL = config('DISCORD_WEBHOOK_URL', default='')

RESEND_API_KEY = config('RESEND_API_KEY', default='')
RESEND_API_URL = config('RESEND_API_URL', default='https://api.resend.com/emails')
AGENCY_REPORT_FROM = config('AGENCY_REPORT_FROM', default='Flow <support@mail.yourflowcrm.com>')

OUTBOUND_HTTP_TIMEOUT = config('OUTBOUND_HTTP_TIMEOUT', default=10.0, cast=float)

# =============================================================================
# REST Framework
# =============================================================================

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'apps.core.authentication.SupabaseJWTAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'apps.core.permissions.IsAuthenticated',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_THROTTLE_RATES': {
        'invites': config('THROTTLE_INVITES', default='30/hour'),
        'uploads': config('THROTTLE_UPLOADS', default='20/hour'),
    },
    'EXCEPTION_HANDLER': 'apps.core.exceptions.custom_exception_handler',
    'UNAUTHENTICATED_USER': None,
}

# =============================================================================
# CORS Configuration
# =============================================================================

CORS_ALLOWED_ORIGINS = config(
    'CORS_ALLOWED_ORIGINS',
    default='http://localhost:3000',
    cast=Csv()
)

CORS_ALLOW_CREDENTIALS = True

CORS_ALLOW_HEADERS = [
    'accept',
    'accept-encoding',
    'authorization',
    'content-type',
    'origin',
    'user-agent',
    'x-cron-secret',
    'x-requested-with',
]

# =============================================================================
# Internationalization
# =============================================================================

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = False
USE_TZ = True

# =============================================================================
# Static files
# =============================================================================

STATIC_URL = '/static/'

# =============================================================================
# Application Settings
# =============================================================================

APP_URL = config('APP_URL', default='http://localhost:3000')

# Zone used by the scheduled reports for "today"
FLOW_REPORT_TIMEZONE = config('FLOW_REPORT_TIMEZONE', default='America/New_York')

# Zone used for analytics buckets when the client does not send one
FLOW_DEFAULT_TIMEZONE = config('FLOW_DEFAULT_TIMEZONE', default='America/New_York')

# Hour (report zone) at which the daily leaderboard is allowed to post
DAILY_LEADERBOARD_HOUR = config('DAILY_LEADERBOARD_HOUR', default=20, cast=int)

# =============================================================================
# Logging
# =============================================================================

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': config('DJANGO_LOG_LEVEL', default='INFO'),
            'propagate': False,
        },
        'apps': {
            'handlers': ['console'],
            'level': 'DEBUG',
            'propagate': False,
        },
    },
}

# =============================================================================
# Default primary key field type
# =============================================================================

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
