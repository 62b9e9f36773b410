"""
Pytest Configuration for Flow Backend Tests

Key Features:
- Enables managed=True for unmanaged models during tests
- Mints real Supabase-style JWTs with the test secret
- Provides API clients authenticated as an agent, an agency owner or an admin
"""
import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from django.apps import apps
from django.conf import settings
from rest_framework.test import APIClient


# =============================================================================
# Database Setup - Enable managed=True for unmanaged models
# =============================================================================

@pytest.fixture(scope='session')
def django_db_setup(django_db_setup, django_db_blocker):
    """
    Create tables for models that normally point at existing Supabase
    tables (managed=False).
    """
    with django_db_blocker.unblock():
        for model in apps.get_models():
            if not model._meta.managed:
                model._meta.managed = True

        from django.core.management import call_command

        call_command('migrate', '--run-syncdb', verbosity=0)


# =============================================================================
# JWT helpers
# =============================================================================

def make_token(profile_id, expires_in: int = 3600, **claims) -> str:
    """Sign a token the way Supabase Auth does for an authenticated user."""
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(profile_id),
        'aud': 'authenticated',
        'iss': f'{settings.SUPABASE_URL}/auth/v1',
        'role': 'authenticated',
        'iat': now,
        'exp': now + timedelta(seconds=expires_in),
        **claims,
    }
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm='HS256')


def client_for(profile) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {make_token(profile.id)}')
    return client


# =============================================================================
# Profile Fixtures
# =============================================================================

@pytest.fixture
def owner(db):
    """Agency owner at the top of a small tree."""
    from tests.factories import ProfileFactory

    return ProfileFactory(first_name='Olivia', last_name='Owner', is_agency_owner=True)


@pytest.fixture
def agent(owner):
    """Agent directly under the owner."""
    from tests.factories import ProfileFactory

    return ProfileFactory(first_name='Adam', last_name='Agent', upline=owner)


@pytest.fixture
def sub_agent(agent):
    """Agent under `agent` (grandchild of the owner)."""
    from tests.factories import ProfileFactory

    return ProfileFactory(first_name='Sam', last_name='Sub', upline=agent)


@pytest.fixture
def outsider(db):
    """Agent in a different tree."""
    from tests.factories import ProfileFactory

    return ProfileFactory(first_name='Otto', last_name='Outside')


@pytest.fixture
def admin(db):
    from tests.factories import ProfileFactory

    return ProfileFactory(first_name='Ada', last_name='Admin', role='admin')


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_client():
    """Basic API client without authentication."""
    return APIClient()


@pytest.fixture
def agent_client(agent):
    return client_for(agent)


@pytest.fixture
def owner_client(owner):
    return client_for(owner)


@pytest.fixture
def admin_client(admin):
    return client_for(admin)


@pytest.fixture
def cron_client():
    client = APIClient()
    client.credentials(HTTP_X_CRON_SECRET=settings.CRON_SECRET)
    return client


@pytest.fixture
def user_id():
    """Generate a consistent user ID for tests."""
    return uuid.uuid4()
