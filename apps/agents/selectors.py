"""
Agent Selectors

Read side of the profile directory.
"""
import logging
from uuid import UUID

from apps.core.authentication import AuthenticatedUser
from apps.core.constants import DEFAULT_THEME, THEME_VARS
from apps.core.hierarchy import build_children_map, closure_from_children, load_directory
from apps.core.models import Profile
from apps.core.permissions import get_visible_agent_ids
from apps.core.utils import display_name

logger = logging.getLogger(__name__)

PROFILE_FIELDS = [
    'id', 'created_at', 'email', 'first_name', 'last_name', 'role', 'is_agency_owner',
    'upline_id', 'comp', 'theme', 'avatar_url', 'must_set_password',
]


def serialize_profile(row: dict, include_private: bool = False) -> dict:
    data = {
        'id': str(row['id']),
        'email': row.get('email'),
        'first_name': row.get('first_name'),
        'last_name': row.get('last_name'),
        'name': display_name(row.get('first_name'), row.get('last_name'), row.get('email')),
        'role': row.get('role') or 'agent',
        'is_agency_owner': bool(row.get('is_agency_owner')),
        'upline_id': str(row['upline_id']) if row.get('upline_id') else None,
        'comp': row.get('comp'),
        'theme': row.get('theme') or DEFAULT_THEME,
        'avatar_url': row.get('avatar_url'),
        'created_at': row['created_at'].isoformat() if row.get('created_at') else None,
    }
    if include_private:
        data['must_set_password'] = bool(row.get('must_set_password'))
        data['discord_webhook_url'] = row.get('discord_webhook_url')
    return data


def profile_to_dict(profile: Profile, include_private: bool = False) -> dict:
    row = {name: getattr(profile, name) for name in PROFILE_FIELDS}
    row['upline_id'] = profile.upline_id
    row['discord_webhook_url'] = profile.discord_webhook_url
    return serialize_profile(row, include_private=include_private)


def get_own_profile(user: AuthenticatedUser) -> dict | None:
    profile = Profile.objects.filter(id=user.id).first()
    if not profile:
        return None
    return profile_to_dict(profile, include_private=True)


def get_theme(theme: str | None) -> dict:
    name = theme if theme in THEME_VARS else DEFAULT_THEME
    return {'theme': name, 'vars': THEME_VARS[name]}


def get_agent_directory(user: AuthenticatedUser, search: str | None = None) -> dict:
    """
    Profiles the caller may see, sorted by name.

    Each row carries its direct downline count so the settings tree can
    render without a second round trip.
    """
    directory = load_directory()
    visible = get_visible_agent_ids(user, directory)

    queryset = Profile.objects.all()
    if visible is not None:
        queryset = queryset.filter(id__in=visible)
    rows = [serialize_profile(row) for row in queryset.values(*PROFILE_FIELDS)]

    term = (search or '').strip().lower()
    if term:
        rows = [
            r for r in rows
            if term in r['name'].lower() or term in (r['email'] or '').lower()
        ]

    children = build_children_map(directory)
    for row in rows:
        row['downline_count'] = len(children.get(UUID(row['id']), []))

    rows.sort(key=lambda r: r['name'].lower())
    return {'agents': rows, 'count': len(rows)}


def get_upline_options(user: AuthenticatedUser, agent_id: UUID | None = None) -> list[dict]:
    """
    Candidate uplines for an agent: the caller's visible directory minus the
    agent and anyone below it.
    """
    directory = load_directory()
    visible = get_visible_agent_ids(user, directory)
    excluded: set = set()
    if agent_id is not None:
        excluded = set(closure_from_children(agent_id, build_children_map(directory)))

    options = []
    for node in directory:
        if node['id'] in excluded:
            continue
        if visible is not None and node['id'] not in visible:
            continue
        options.append({
            'id': str(node['id']),
            'name': display_name(node.get('first_name'), node.get('last_name'), node.get('email')),
        })
    options.sort(key=lambda o: o['name'].lower())
    return options
