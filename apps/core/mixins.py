"""
Core View Mixins

Provides standardized authentication and request parsing helpers
for all API views in the application.
"""
from datetime import date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings

from .authentication import AuthenticatedUser, get_user_context
from .exceptions import AuthenticationError, ValidationError


class AuthenticatedAPIView:
    """
    Mixin providing standardized authentication and error handling.

    Usage:
        class MyView(AuthenticatedAPIView, APIView):
            def get(self, request):
                user = self.get_user(request)  # Raises if not authenticated
                # ... view logic
    """

    def get_user(self, request) -> AuthenticatedUser:
        """
        Get authenticated user or raise 401.
        """
        user = get_user_context(request)
        if not user:
            raise AuthenticationError()
        return user

    def parse_uuid(self, value: str, field_name: str = "id") -> UUID:
        """
        Parse string to UUID or raise validation error.

        Raises:
            ValidationError if missing or invalid format
        """
        if not value:
            raise ValidationError(f"{field_name} is required")
        try:
            return UUID(str(value))
        except ValueError as err:
            raise ValidationError(f"Invalid {field_name} format") from err

    def parse_uuid_optional(self, value: str) -> UUID | None:
        """Parse string to UUID, return None if empty or invalid."""
        if not value:
            return None
        try:
            return UUID(str(value))
        except ValueError:
            return None

    def parse_date(self, value: str, fmt: str = "%Y-%m-%d") -> date | None:
        """Parse date string, return None if empty or invalid."""
        if not value:
            return None
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            return None

    def parse_timezone(self, request) -> ZoneInfo:
        """Viewer's zone from ?tz=, falling back to FLOW_DEFAULT_TIMEZONE."""
        name = request.query_params.get('tz') or settings.FLOW_DEFAULT_TIMEZONE
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as err:
            raise ValidationError(f"Unknown time zone: {name}") from err
