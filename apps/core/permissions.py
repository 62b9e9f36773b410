"""
Permission Classes for Flow Backend

Role-based access control and the record scoping rules that stand in for
the database's row-level security policies.
"""
import logging
from uuid import UUID

from rest_framework import permissions

from .authentication import AuthenticatedUser
from .hierarchy import get_team_ids, load_directory

logger = logging.getLogger(__name__)


class IsAuthenticated(permissions.BasePermission):
    """
    Allows access only to authenticated callers.
    """
    message = 'Authentication required'

    def has_permission(self, request, view):
        return isinstance(getattr(request, 'user', None), AuthenticatedUser)


class IsAdmin(permissions.BasePermission):
    """
    Allows access only to admin users.
    """
    message = 'Locked: Admins only'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not isinstance(user, AuthenticatedUser):
            return False
        return user.is_admin


class IsAdminOrAgencyOwner(permissions.BasePermission):
    """
    Allows access to admins and agency owners.
    """
    message = 'Admins and agency owners only'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not isinstance(user, AuthenticatedUser):
            return False
        return user.is_privileged


def get_visible_agent_ids(user: AuthenticatedUser, directory: list[dict] | None = None) -> list[UUID] | None:
    """
    Agent ids whose records the user may read in team views.

    Admins see everyone (None means "no filter"); everybody else sees
    themselves plus their downline.
    """
    if user.is_admin:
        return None
    return get_team_ids(user.id, directory)


def get_record_scope(user: AuthenticatedUser, directory: list[dict] | None = None) -> list[UUID] | None:
    """
    Agent ids whose records the user may edit.

    Admins: everyone. Agency owners: their tree. Agents: only themselves.
    """
    if user.is_admin:
        return None
    if user.is_agency_owner:
        return get_team_ids(user.id, directory)
    return [user.id]


def scope_queryset(queryset, agent_ids: list[UUID] | None, field: str = 'agent_id'):
    """Restrict a queryset to the given agent ids (None leaves it unfiltered)."""
    if agent_ids is None:
        return queryset
    return queryset.filter(**{f'{field}__in': agent_ids})


def can_access_agent(user: AuthenticatedUser, agent_id: UUID | None, for_write: bool = True) -> bool:
    """Whether the user may act on records owned by agent_id."""
    if user.is_admin:
        return True
    if agent_id is None:
        return False
    if agent_id == user.id:
        return True
    directory = load_directory()
    scope = get_record_scope(user, directory) if for_write else get_visible_agent_ids(user, directory)
    return scope is None or agent_id in scope
