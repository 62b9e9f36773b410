"""
Supabase JWT Authentication for Django REST Framework

Validates JWTs issued by Supabase Auth and attaches profile context to requests.
"""
import hmac
import logging
from dataclasses import dataclass
from uuid import UUID

import jwt
from django.conf import settings
from rest_framework import authentication, exceptions

from .models import Profile
from .utils import display_name

logger = logging.getLogger(__name__)

SYSTEM_USER_ID = UUID('00000000-0000-0000-0000-000000000000')


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated caller.

    This is NOT a Django User model - it's a lightweight container
    for context derived from the JWT and the profiles table.
    """
    id: UUID                      # profiles.id == auth.users.id
    email: str
    role: str                     # 'admin' or 'agent'
    is_agency_owner: bool
    upline_id: UUID | None = None
    first_name: str | None = None
    last_name: str | None = None
    comp: int | None = None
    theme: str | None = None
    must_set_password: bool = False
    is_system: bool = False

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def pk(self) -> UUID:
        # DRF user throttles key on request.user.pk
        return self.id

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    @property
    def is_privileged(self) -> bool:
        """Admins and agency owners manage other agents."""
        return self.is_admin or self.is_agency_owner

    @property
    def full_name(self) -> str:
        return display_name(self.first_name, self.last_name, self.email)


def build_authenticated_user(profile: Profile) -> AuthenticatedUser:
    return AuthenticatedUser(
        id=profile.id,
        email=profile.email or '',
        role=profile.role or 'agent',
        is_agency_owner=bool(profile.is_agency_owner),
        upline_id=profile.upline_id,
        first_name=profile.first_name,
        last_name=profile.last_name,
        comp=profile.comp,
        theme=profile.theme,
        must_set_password=bool(profile.must_set_password),
    )


class SupabaseJWTAuthentication(authentication.BaseAuthentication):
    """
    Authenticates requests using Supabase JWTs.

    Flow:
    1. Extract Bearer token from Authorization header
    2. Decode and validate JWT using Supabase JWT secret
    3. Look up the profile by id (sub claim)
    4. Return AuthenticatedUser with full context
    """

    def authenticate(self, request):
        """
        Authenticate the request and return (user, token) or None.

        Raises:
            AuthenticationFailed: If credentials are invalid
        """
        auth_header = request.META.get('HTTP_AUTHORIZATION', '')

        if not auth_header.startswith('Bearer '):
            return None

        token = auth_header[7:].strip()  # Remove 'Bearer ' prefix

        if not token:
            return None

        payload = self._decode_jwt(token)
        if not payload:
            raise exceptions.AuthenticationFailed('Invalid or expired token')

        user = self._get_user_from_payload(payload)
        if not user:
            raise exceptions.AuthenticationFailed('User not found')

        return (user, token)

    def authenticate_header(self, request):
        """
        Return the WWW-Authenticate header value for 401 responses.
        """
        return 'Bearer realm="api"'

    def _decode_jwt(self, token: str) -> dict | None:
        """
        Decode and validate a Supabase JWT.

        Returns:
            dict: The decoded payload if valid
            None: If token is invalid or expired
        """
        jwt_secret = getattr(settings, 'SUPABASE_JWT_SECRET', None)

        if not jwt_secret:
            logger.error('SUPABASE_JWT_SECRET not configured')
            return None

        supabase_url = getattr(settings, 'SUPABASE_URL', '')
        expected_issuer = f'{supabase_url}/auth/v1' if supabase_url else None

        decode_kwargs = {
            'jwt': token,
            'key': jwt_secret,
            'algorithms': ['HS256'],
            'audience': 'authenticated',
            'options': {
                'verify_exp': True,
                'verify_aud': True,
                'verify_iss': bool(expected_issuer),
            },
        }
        if expected_issuer:
            decode_kwargs['issuer'] = expected_issuer

        try:
            return jwt.decode(**decode_kwargs)
        except jwt.ExpiredSignatureError:
            logger.debug('JWT has expired')
            return None
        except jwt.InvalidAudienceError:
            logger.debug('JWT has invalid audience')
            return None
        except jwt.InvalidTokenError as e:
            logger.debug(f'JWT validation failed: {e}')
            return None

    def _get_user_from_payload(self, payload: dict) -> AuthenticatedUser | None:
        """Look up the caller's profile by the JWT sub claim."""
        sub = payload.get('sub')
        if not sub:
            logger.warning('JWT missing sub claim')
            return None

        try:
            profile_id = UUID(str(sub))
        except ValueError:
            logger.warning(f'JWT sub is not a UUID: {sub}')
            return None

        profile = Profile.objects.filter(id=profile_id).first()
        if not profile:
            logger.warning(f'No profile found for auth user: {profile_id}')
            return None

        return build_authenticated_user(profile)


def get_user_context(request) -> AuthenticatedUser | None:
    """
    Utility function to get authenticated user from request.

    Returns:
        AuthenticatedUser if authenticated, None otherwise
    """
    user = getattr(request, 'user', None)
    if isinstance(user, AuthenticatedUser):
        return user
    return None


class CronSecretAuthentication(authentication.BaseAuthentication):
    """
    Authenticates requests using the shared CRON_SECRET.

    Used by the scheduler, which has no user context. Returns a system-level
    AuthenticatedUser with admin privileges.

    The secret is accepted from the X-Cron-Secret header, a `secret` query
    parameter, or an `Authorization: Bearer <secret>` header. A bearer
    value that is not the secret is left for JWT authentication.
    """

    def authenticate(self, request):
        expected_secret = getattr(settings, 'CRON_SECRET', None)
        if not expected_secret:
            logger.error('CRON_SECRET not configured in settings')
            return None

        header_secret = request.META.get('HTTP_X_CRON_SECRET', '')
        query_params = getattr(request, 'query_params', request.GET)
        query_secret = query_params.get('secret', '')
        explicit = header_secret or query_secret

        if explicit:
            # Use constant-time comparison to prevent timing attacks
            if not hmac.compare_digest(explicit.encode(), expected_secret.encode()):
                raise exceptions.AuthenticationFailed('Invalid cron secret')
            return (self._system_user(), None)

        auth_header = request.META.get('HTTP_AUTHORIZATION', '')
        if auth_header.startswith('Bearer '):
            bearer = auth_header[7:].strip()
            if bearer and hmac.compare_digest(bearer.encode(), expected_secret.encode()):
                return (self._system_user(), None)

        return None

    def authenticate_header(self, request):
        return 'Bearer realm="cron"'

    def _system_user(self) -> AuthenticatedUser:
        return AuthenticatedUser(
            id=SYSTEM_USER_ID,
            email='system@internal',
            role='admin',
            is_agency_owner=False,
            first_name='System',
            last_name='Cron',
            is_system=True,
        )
