"""
Agents API Views

Endpoints:
- GET /api/agents - Directory (scoped to the caller's team)
- GET /api/agents/upline-options - Valid uplines (optionally for ?agent_id=)
- PATCH /api/agents/{id} - Admin/owner edit
- POST /api/agents/{id}/position - Change upline + comp
- GET/PATCH /api/user/profile - Own profile
- GET /api/user/theme - Theme CSS variables
- POST /api/user/avatar - Upload avatar
- POST /api/admin/invite - Invite by email
- POST /api/admin/invite-pin - Create login with a 6-digit PIN
"""
import logging

from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.mixins import AuthenticatedAPIView
from apps.core.permissions import IsAdminOrAgencyOwner, IsAuthenticated
from apps.core.throttles import InviteRateThrottle, UploadRateThrottle

from .selectors import (
    get_agent_directory,
    get_own_profile,
    get_theme,
    get_upline_options,
    profile_to_dict,
)
from .services import (
    change_agent_position,
    invite_by_email,
    invite_with_pin,
    update_agent,
    update_own_profile,
    upload_avatar,
)

logger = logging.getLogger(__name__)


class AgentsListView(AuthenticatedAPIView, APIView):
    """GET /api/agents"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = self.get_user(request)
        return Response(get_agent_directory(user, search=request.query_params.get('q')))


class UplineOptionsView(AuthenticatedAPIView, APIView):
    """GET /api/agents/upline-options"""

    permission_classes = [IsAuthenticated, IsAdminOrAgencyOwner]

    def get(self, request):
        user = self.get_user(request)
        agent_id = self.parse_uuid_optional(request.query_params.get('agent_id'))
        return Response({'options': get_upline_options(user, agent_id)})


class AgentDetailView(AuthenticatedAPIView, APIView):
    """PATCH /api/agents/{id}"""

    permission_classes = [IsAuthenticated, IsAdminOrAgencyOwner]

    def patch(self, request, agent_id):
        user = self.get_user(request)
        profile = update_agent(self.parse_uuid(agent_id, 'agent_id'), user, request.data)
        return Response({'ok': True, 'agent': profile_to_dict(profile)})


class AgentPositionView(AuthenticatedAPIView, APIView):
    """POST /api/agents/{id}/position"""

    permission_classes = [IsAuthenticated, IsAdminOrAgencyOwner]

    def post(self, request, agent_id):
        user = self.get_user(request)
        profile = change_agent_position(self.parse_uuid(agent_id, 'agent_id'), user, request.data)
        return Response({'ok': True, 'agent': profile_to_dict(profile)})


class UserProfileView(AuthenticatedAPIView, APIView):
    """GET/PATCH /api/user/profile"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = self.get_user(request)
        profile = get_own_profile(user)
        if not profile:
            return Response(
                {'ok': False, 'error': 'Profile not found'},
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(profile)

    def patch(self, request):
        user = self.get_user(request)
        profile = update_own_profile(user, request.data)
        return Response({'ok': True, 'profile': profile_to_dict(profile, include_private=True)})


class UserThemeView(AuthenticatedAPIView, APIView):
    """GET /api/user/theme - ?theme= previews another theme."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = self.get_user(request)
        return Response(get_theme(request.query_params.get('theme') or user.theme))


class UserAvatarView(AuthenticatedAPIView, APIView):
    """POST /api/user/avatar (multipart, field `file`)"""

    permission_classes = [IsAuthenticated]
    throttle_classes = [UploadRateThrottle]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        user = self.get_user(request)
        url = upload_avatar(user, request.FILES.get('file'))
        return Response({'ok': True, 'avatar_url': url})


class InviteView(AuthenticatedAPIView, APIView):
    """POST /api/admin/invite"""

    permission_classes = [IsAuthenticated, IsAdminOrAgencyOwner]
    throttle_classes = [InviteRateThrottle]

    def post(self, request):
        user = self.get_user(request)
        return Response(invite_by_email(user, request.data))


class InvitePinView(AuthenticatedAPIView, APIView):
    """POST /api/admin/invite-pin"""

    permission_classes = [IsAuthenticated, IsAdminOrAgencyOwner]
    throttle_classes = [InviteRateThrottle]

    def post(self, request):
        user = self.get_user(request)
        return Response(invite_with_pin(user, request.data))
