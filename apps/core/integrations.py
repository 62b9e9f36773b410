"""
Outbound integrations

Thin httpx wrappers around the Supabase Auth admin API, Supabase Storage,
Discord webhooks and the Resend email API. Every function raises
UpstreamError when the remote call fails; nothing is retried.
"""
import logging

import httpx
from django.conf import settings

from .exceptions import UpstreamError

logger = logging.getLogger(__name__)


def _timeout() -> float:
    return getattr(settings, 'OUTBOUND_HTTP_TIMEOUT', 10.0)


def _service_headers() -> dict:
    key = settings.SUPABASE_SERVICE_ROLE_KEY
    return {
        'apikey': key,
        'Authorization': f'Bearer {key}',
        'Content-Type': 'application/json',
    }


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        data = response.json() if response.content else {}
    except ValueError:
        data = {}
    if isinstance(data, dict):
        return data.get('msg') or data.get('message') or data.get('error_description') or data.get('error') or fallback
    return fallback


# =============================================================================
# Supabase Auth (admin)
# =============================================================================

def supabase_invite_user(email: str, redirect_to: str | None = None, data: dict | None = None) -> dict:
    """
    Invite a user via the Supabase Auth admin API (sends the invite email).

    Returns:
        The created auth user (dict with at least `id`)
    """
    payload: dict = {'email': email}
    if data:
        payload['data'] = data
    params = {'redirect_to': redirect_to} if redirect_to else None

    try:
        with httpx.Client() as client:
            response = client.post(
                f'{settings.SUPABASE_URL}/auth/v1/invite',
                json=payload,
                params=params,
                headers=_service_headers(),
                timeout=_timeout(),
            )
    except httpx.RequestError as e:
        logger.error(f'Supabase invite request error: {e}')
        raise UpstreamError('Authentication service unavailable') from e

    if response.status_code not in (200, 201):
        message = _error_message(response, 'Failed to send invite')
        logger.error(f'Supabase invite failed for {email}: {message}')
        raise UpstreamError(message)

    return response.json()


def supabase_create_user(email: str, password: str, user_metadata: dict | None = None) -> dict:
    """Create a confirmed auth user with a known password."""
    payload = {
        'email': email,
        'password': password,
        'email_confirm': True,
        'user_metadata': user_metadata or {},
    }

    try:
        with httpx.Client() as client:
            response = client.post(
                f'{settings.SUPABASE_URL}/auth/v1/admin/users',
                json=payload,
                headers=_service_headers(),
                timeout=_timeout(),
            )
    except httpx.RequestError as e:
        logger.error(f'Supabase create user request error: {e}')
        raise UpstreamError('Authentication service unavailable') from e

    if response.status_code not in (200, 201):
        message = _error_message(response, 'Failed to create user')
        logger.error(f'Supabase create user failed for {email}: {message}')
        raise UpstreamError(message)

    return response.json()


# =============================================================================
# Supabase Storage
# =============================================================================

def storage_public_url(bucket: str, path: str) -> str:
    return f'{settings.SUPABASE_URL}/storage/v1/object/public/{bucket}/{path}'


def storage_upload(bucket: str, path: str, content: bytes, content_type: str) -> str:
    """
    Upload (upsert) an object and return its public URL.
    """
    headers = _service_headers()
    headers['Content-Type'] = content_type
    headers['x-upsert'] = 'true'

    try:
        with httpx.Client() as client:
            response = client.post(
                f'{settings.SUPABASE_URL}/storage/v1/object/{bucket}/{path}',
                content=content,
                headers=headers,
                timeout=30.0,
            )
    except httpx.RequestError as e:
        logger.error(f'Storage upload request error: {e}')
        raise UpstreamError('Storage service unavailable') from e

    if response.status_code not in (200, 201):
        message = _error_message(response, 'Failed to upload file')
        logger.error(f'Storage upload failed for {bucket}/{path}: {message}')
        raise UpstreamError(message)

    return storage_public_url(bucket, path)


# =============================================================================
# Discord
# =============================================================================

def post_discord_webhook(url: str, payload: dict) -> None:
    """POST a message or embed payload to a Discord webhook."""
    try:
        with httpx.Client() as client:
            response = client.post(url, json=payload, timeout=_timeout())
    except httpx.RequestError as e:
        logger.error(f'Discord webhook request error: {e}')
        raise UpstreamError('Discord webhook unreachable') from e

    if response.status_code >= 300:
        logger.error(f'Discord webhook failed: {response.status_code} {response.text[:200]}')
        raise UpstreamError(
            'Discord webhook failed',
            details={'status': response.status_code, 'body': response.text[:500]},
        )


# =============================================================================
# Email (Resend)
# =============================================================================

def send_email(*, to: str | list[str], subject: str, text: str, html: str | None = None,
               sender: str | None = None) -> dict:
    """Send a transactional email through Resend."""
    api_key = settings.RESEND_API_KEY
    if not api_key:
        raise UpstreamError('RESEND_API_KEY is not configured')

    payload = {
        'from': sender or settings.AGENCY_REPORT_FROM,
        'to': to if isinstance(to, list) else [to],
        'subject': subject,
        'text': text,
    }
    if html:
        payload['html'] = html

    try:
        with httpx.Client() as client:
            response = client.post(
                settings.RESEND_API_URL,
                json=payload,
                headers={
                    'Authorization': f'Bearer {api_key}',
                    'Content-Type': 'application/json',
                },
                timeout=_timeout(),
            )
    except httpx.RequestError as e:
        logger.error(f'Resend request error: {e}')
        raise UpstreamError('Email service unavailable') from e

    if response.status_code >= 300:
        message = _error_message(response, 'Failed to send email')
        logger.error(f'Resend failed for {payload["to"]}: {message}')
        raise UpstreamError(message, details={'status': response.status_code})

    return response.json() if response.content else {}
