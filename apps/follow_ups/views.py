"""
Follow-Ups API Views

Endpoints:
- GET /api/follow-ups?filter=due_now|today|next_7_days|all|completed
- POST /api/follow-ups - Schedule a follow up
- GET /api/follow-ups/due - Due reminders for the notification bell
- DELETE /api/follow-ups/{id}
- POST /api/follow-ups/{id}/reschedule
- POST /api/follow-ups/{id}/complete
- POST /api/follow-ups/{id}/deny
- POST /api/follow-ups/{id}/convert
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.constants import FOLLOW_UP_FILTERS
from apps.core.exceptions import ValidationError
from apps.core.mixins import AuthenticatedAPIView
from apps.core.permissions import IsAuthenticated
from apps.deals.selectors import deal_to_dict

from .selectors import follow_up_to_dict, get_due_follow_ups, get_follow_ups
from .services import (
    close_follow_up,
    convert_follow_up,
    create_follow_up,
    delete_follow_up,
    parse_follow_up_input,
    reschedule_follow_up,
    resolve_follow_up_at,
)

logger = logging.getLogger(__name__)


class FollowUpListCreateView(AuthenticatedAPIView, APIView):
    """GET/POST /api/follow-ups"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = self.get_user(request)
        tz = self.parse_timezone(request)

        filter_name = request.query_params.get('filter', 'due_now')
        if filter_name not in FOLLOW_UP_FILTERS:
            return Response(
                {'ok': False, 'error': f'filter must be one of: {", ".join(FOLLOW_UP_FILTERS)}'},
                status=status.HTTP_400_BAD_REQUEST
            )

        items = get_follow_ups(user, filter_name, tz)
        return Response({'follow_ups': items, 'count': len(items), 'filter': filter_name})

    def post(self, request):
        user = self.get_user(request)
        tz = self.parse_timezone(request)

        input_data = parse_follow_up_input(request.data, tz)
        follow_up = create_follow_up(user, input_data)
        return Response(
            {'ok': True, 'follow_up': follow_up_to_dict(follow_up)},
            status=status.HTTP_201_CREATED
        )


class DueFollowUpsView(AuthenticatedAPIView, APIView):
    """GET /api/follow-ups/due"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = self.get_user(request)
        items = get_due_follow_ups(user)
        return Response({'follow_ups': items, 'count': len(items)})


class FollowUpDetailView(AuthenticatedAPIView, APIView):
    """DELETE /api/follow-ups/{id}"""

    permission_classes = [IsAuthenticated]

    def delete(self, request, follow_up_id):
        user = self.get_user(request)
        delete_follow_up(self.parse_uuid(follow_up_id, 'follow_up_id'), user)
        return Response({'ok': True})


class FollowUpActionView(AuthenticatedAPIView, APIView):
    """POST /api/follow-ups/{id}/{action}"""

    permission_classes = [IsAuthenticated]
    action = None

    def post(self, request, follow_up_id):
        user = self.get_user(request)
        follow_up_uuid = self.parse_uuid(follow_up_id, 'follow_up_id')

        if self.action == 'reschedule':
            follow_up_at = resolve_follow_up_at(request.data, self.parse_timezone(request))
            if not follow_up_at:
                raise ValidationError('Pick a new follow up time')
            follow_up = reschedule_follow_up(follow_up_uuid, user, follow_up_at)
        elif self.action == 'complete':
            follow_up = close_follow_up(follow_up_uuid, user, outcome='completed')
        elif self.action == 'deny':
            follow_up = close_follow_up(follow_up_uuid, user, outcome='denied')
        else:
            deal = convert_follow_up(follow_up_uuid, user)
            return Response({'ok': True, 'deal': deal_to_dict(deal)}, status=status.HTTP_201_CREATED)

        return Response({'ok': True, 'follow_up': follow_up_to_dict(follow_up)})
