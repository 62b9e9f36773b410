"""
Agent Services

Write side of the profile directory: invites, self-service profile edits,
admin edits, position (upline + comp) changes and avatar uploads.
"""
import logging
import secrets
from dataclasses import dataclass
from uuid import UUID

from django.conf import settings

from apps.core.authentication import AuthenticatedUser
from apps.core.constants import (
    AVATAR_EXTENSIONS,
    COMP_MAX,
    COMP_MIN,
    COMP_STEP,
    DEFAULT_COMP,
    DEFAULT_THEME,
    MAX_AVATAR_BYTES,
    ROLES,
    THEMES,
)
from apps.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    UpstreamError,
    ValidationError,
)
from apps.core.hierarchy import load_directory, would_create_cycle
from apps.core.integrations import storage_upload, supabase_create_user, supabase_invite_user
from apps.core.models import Profile
from apps.core.permissions import get_record_scope
from apps.core.validators import clean_choice, clean_text

logger = logging.getLogger(__name__)


@dataclass
class InviteInput:
    email: str
    first_name: str | None = None
    last_name: str | None = None
    upline_id: UUID | None = None
    comp: int = DEFAULT_COMP
    role: str = 'agent'
    is_agency_owner: bool = False
    theme: str = DEFAULT_THEME


def _clean_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in ('1', 'true', 'yes', 'on')


def clean_comp(value, default: int | None = DEFAULT_COMP) -> int | None:
    """Comp level between 0 and 200 in steps of 5."""
    if value in (None, ''):
        return default
    try:
        comp = int(float(str(value).strip()))
    except ValueError as err:
        raise ValidationError('Comp must be a number', details={'comp': 'invalid number'}) from err
    if comp < COMP_MIN or comp > COMP_MAX or comp % COMP_STEP:
        raise ValidationError(
            f'Comp must be between {COMP_MIN} and {COMP_MAX} in steps of {COMP_STEP}',
            details={'comp': 'out of range'},
        )
    return comp


def clean_upline(value) -> UUID | None:
    if value in (None, ''):
        return None
    try:
        upline_id = UUID(str(value))
    except ValueError as err:
        raise ValidationError('Invalid upline_id format', details={'upline_id': 'invalid uuid'}) from err
    if not Profile.objects.filter(id=upline_id).exists():
        raise NotFoundError('Upline not found')
    return upline_id


def parse_invite_input(data: dict) -> InviteInput:
    if hasattr(data, 'dict'):
        data = data.dict()

    email = str(data.get('email') or '').strip().lower()
    if not email:
        raise ValidationError('Email required', details={'email': 'required'})

    return InviteInput(
        email=email,
        first_name=clean_text(data.get('first_name'), 'first_name'),
        last_name=clean_text(data.get('last_name'), 'last_name'),
        upline_id=clean_upline(data.get('upline_id')),
        comp=clean_comp(data.get('comp')),
        role='admin' if data.get('role') == 'admin' else 'agent',
        is_agency_owner=_clean_bool(data.get('is_agency_owner')),
        theme=clean_choice(str(data.get('theme') or '').strip(), 'theme', THEMES, default=DEFAULT_THEME),
    )


def _check_invite_scope(inviter: AuthenticatedUser, invite: InviteInput) -> InviteInput:
    """
    Agency owners invite into their own tree and cannot hand out admin.
    """
    if inviter.is_admin:
        return invite
    if invite.role == 'admin':
        raise PermissionDeniedError('Only admins can invite admins')
    if invite.upline_id is None:
        invite.upline_id = inviter.id
    scope = get_record_scope(inviter)
    if scope is not None and invite.upline_id not in scope:
        raise PermissionDeniedError('Upline must be in your agency')
    return invite


def _upsert_profile(user_id: UUID, invite: InviteInput, **extra) -> Profile:
    profile, created = Profile.objects.update_or_create(
        id=user_id,
        defaults={
            'email': invite.email,
            'first_name': invite.first_name,
            'last_name': invite.last_name,
            'role': invite.role,
            'is_agency_owner': invite.is_agency_owner,
            'upline_id': invite.upline_id,
            'comp': invite.comp,
            'theme': invite.theme,
            **extra,
        },
    )
    logger.info(f'Profile {"created" if created else "updated"} for invited user {user_id}')
    return profile


def _auth_user_id(payload: dict) -> UUID:
    user = payload.get('user') if isinstance(payload.get('user'), dict) else payload
    user_id = user.get('id') if isinstance(user, dict) else None
    if not user_id:
        raise UpstreamError('User create failed')
    return UUID(str(user_id))


def invite_by_email(inviter: AuthenticatedUser, data: dict) -> dict:
    """
    Send a Supabase invite email and create/update the invitee's profile.
    """
    invite = _check_invite_scope(inviter, parse_invite_input(data))

    invited = supabase_invite_user(
        invite.email,
        redirect_to=f'{settings.APP_URL}/login',
        data={'first_name': invite.first_name, 'last_name': invite.last_name},
    )
    user_id = _auth_user_id(invited)
    _upsert_profile(user_id, invite, avatar_url=None)

    logger.info(f'User {inviter.id} invited {invite.email} as {invite.role}')
    return {'ok': True, 'user_id': str(user_id)}


def generate_pin() -> str:
    return str(100000 + secrets.randbelow(900000))


def invite_with_pin(inviter: AuthenticatedUser, data: dict) -> dict:
    """
    Create a confirmed auth user whose temporary password is a 6-digit PIN.

    The profile is flagged must_set_password; the PIN is returned so the
    inviter can hand it over.
    """
    invite = _check_invite_scope(inviter, parse_invite_input(data))
    pin = generate_pin()

    created = supabase_create_user(
        invite.email,
        pin,
        user_metadata={'first_name': invite.first_name, 'last_name': invite.last_name},
    )
    user_id = _auth_user_id(created)
    _upsert_profile(user_id, invite, must_set_password=True)

    logger.info(f'User {inviter.id} created PIN login for {invite.email}')
    return {'ok': True, 'user_id': str(user_id), 'pin': pin}


def update_own_profile(user: AuthenticatedUser, data: dict) -> Profile:
    """Name, theme, avatar URL and Discord webhook; nothing role-bearing."""
    if hasattr(data, 'dict'):
        data = data.dict()

    profile = Profile.objects.filter(id=user.id).first()
    if not profile:
        raise NotFoundError('Profile not found')

    updates = {}
    if 'first_name' in data:
        updates['first_name'] = clean_text(data.get('first_name'), 'first_name')
    if 'last_name' in data:
        updates['last_name'] = clean_text(data.get('last_name'), 'last_name')
    if 'theme' in data:
        updates['theme'] = clean_choice(data.get('theme'), 'theme', THEMES, default=DEFAULT_THEME)
    if 'avatar_url' in data:
        updates['avatar_url'] = clean_text(data.get('avatar_url'), 'avatar_url', max_length=2000)
    if 'discord_webhook_url' in data:
        url = clean_text(data.get('discord_webhook_url'), 'discord_webhook_url', max_length=2000)
        if url and not url.startswith('https://'):
            raise ValidationError(
                'Discord webhook URL must start with https://',
                details={'discord_webhook_url': 'invalid url'},
            )
        updates['discord_webhook_url'] = url
    if 'must_set_password' in data and not _clean_bool(data.get('must_set_password')):
        # Cleared once the user has picked a real password
        updates['must_set_password'] = False

    for name, value in updates.items():
        setattr(profile, name, value)
    if updates:
        profile.save(update_fields=list(updates))
        logger.info(f'Profile {user.id} updated: {sorted(updates)}')
    return profile


def _get_agent_for_write(agent_id: UUID, user: AuthenticatedUser, directory: list[dict]) -> Profile:
    profile = Profile.objects.filter(id=agent_id).first()
    if not profile:
        raise NotFoundError('Agent not found')
    if not user.is_admin and agent_id == user.id:
        raise PermissionDeniedError('Use your profile settings to edit your own account')
    scope = get_record_scope(user, directory)
    if scope is not None and agent_id not in scope:
        raise PermissionDeniedError('You do not have access to this agent')
    return profile


def _apply_upline(profile: Profile, upline_id: UUID | None, user: AuthenticatedUser, directory: list[dict]) -> None:
    if would_create_cycle(profile.id, upline_id, directory):
        raise ConflictError(
            'Upline cannot be the agent or one of their downlines',
            details={'upline_id': 'cycle'},
        )
    scope = get_record_scope(user, directory)
    if upline_id is None and scope is not None:
        raise PermissionDeniedError('Only admins can remove an upline')
    if upline_id is not None and scope is not None and upline_id not in scope:
        raise PermissionDeniedError('Upline must be in your agency')
    profile.upline_id = upline_id


def update_agent(agent_id: UUID, user: AuthenticatedUser, data: dict) -> Profile:
    """
    Admin/owner edit of another profile.

    Only admins may change role or the agency-owner flag.
    """
    if hasattr(data, 'dict'):
        data = data.dict()

    directory = load_directory()
    profile = _get_agent_for_write(agent_id, user, directory)
    updated = []

    if 'role' in data or 'is_agency_owner' in data:
        if not user.is_admin:
            raise PermissionDeniedError('Locked: Admins only')
        if 'role' in data:
            profile.role = clean_choice(data.get('role'), 'role', ROLES, default='agent')
            updated.append('role')
        if 'is_agency_owner' in data:
            profile.is_agency_owner = _clean_bool(data.get('is_agency_owner'))
            updated.append('is_agency_owner')

    if 'first_name' in data:
        profile.first_name = clean_text(data.get('first_name'), 'first_name')
        updated.append('first_name')
    if 'last_name' in data:
        profile.last_name = clean_text(data.get('last_name'), 'last_name')
        updated.append('last_name')
    if 'comp' in data:
        profile.comp = clean_comp(data.get('comp'))
        updated.append('comp')
    if 'theme' in data:
        profile.theme = clean_choice(data.get('theme'), 'theme', THEMES, default=DEFAULT_THEME)
        updated.append('theme')
    if 'upline_id' in data:
        _apply_upline(profile, clean_upline(data.get('upline_id')), user, directory)
        updated.append('upline')

    if updated:
        profile.save(update_fields=updated)
        logger.info(f'Agent {agent_id} updated by {user.id}: {sorted(updated)}')
    return profile


def change_agent_position(agent_id: UUID, user: AuthenticatedUser, data: dict) -> Profile:
    """Move an agent under a new upline and/or set their comp level."""
    if hasattr(data, 'dict'):
        data = data.dict()

    directory = load_directory()
    profile = _get_agent_for_write(agent_id, user, directory)

    if 'upline_id' in data:
        _apply_upline(profile, clean_upline(data.get('upline_id')), user, directory)
    profile.comp = clean_comp(data.get('comp'), default=profile.comp)
    profile.save(update_fields=['upline', 'comp'])

    effective = data.get('effective_date') or 'now'
    logger.info(
        f'Agent {agent_id} position changed by {user.id}: '
        f'upline={profile.upline_id} comp={profile.comp} effective={effective}'
    )
    return profile


def upload_avatar(user: AuthenticatedUser, upload) -> str:
    """
    Store the file as {user_id}.{ext} in the avatars bucket (upsert) and
    point the profile at its public URL.
    """
    if upload is None:
        raise ValidationError('file is required', details={'file': 'required'})

    name = getattr(upload, 'name', '') or ''
    ext = name.rsplit('.', 1)[-1].lower() if '.' in name else 'png'
    if ext not in AVATAR_EXTENSIONS:
        raise ValidationError(
            f'Avatar must be one of: {", ".join(AVATAR_EXTENSIONS)}',
            details={'file': 'invalid type'},
        )
    if upload.size > MAX_AVATAR_BYTES:
        raise ValidationError('Avatar must be 5MB or smaller', details={'file': 'too large'})

    path = f'{user.id}.{ext}'
    content_type = getattr(upload, 'content_type', None) or f'image/{ext}'
    url = storage_upload(settings.AVATAR_BUCKET, path, upload.read(), content_type)

    Profile.objects.filter(id=user.id).update(avatar_url=url)
    logger.info(f'Avatar uploaded for {user.id}: {path}')
    return url
