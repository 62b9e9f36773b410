"""
Custom Throttle Classes for Flow Backend

Provides rate limiting for security-sensitive endpoints.
"""
from rest_framework.throttling import UserRateThrottle


class InviteRateThrottle(UserRateThrottle):
    """
    Rate limiting for invite endpoints.

    Applied to: admin invite, admin invite-pin
    Each call creates an auth user and may send an email.
    """
    scope = 'invites'


class UploadRateThrottle(UserRateThrottle):
    """
    Rate limiting for file upload endpoints.

    Prevents abuse of storage resources.
    """
    scope = 'uploads'
