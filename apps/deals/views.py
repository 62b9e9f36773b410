"""
Deals API Views

Endpoints:
- GET /api/deals - Deal house (list + search)
- POST /api/deals - Post a new deal
- GET /api/deals/{id} - Get deal details
- PATCH /api/deals/{id} - Update a deal
- DELETE /api/deals/{id} - Delete a deal
- POST /api/deals/{id}/status - Change deal status
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.constants import MAX_DEAL_HOUSE_ROWS
from apps.core.mixins import AuthenticatedAPIView
from apps.core.permissions import IsAuthenticated

from .selectors import deal_to_dict, get_deal_by_id, get_deal_house
from .services import (
    create_deal,
    delete_deal,
    parse_deal_input,
    update_deal,
    update_deal_status,
)

logger = logging.getLogger(__name__)


class DealsListCreateView(AuthenticatedAPIView, APIView):
    """GET/POST /api/deals - Deal house or post a deal."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = self.get_user(request)

        try:
            limit = int(request.query_params.get('limit', MAX_DEAL_HOUSE_ROWS))
        except ValueError:
            limit = MAX_DEAL_HOUSE_ROWS

        result = get_deal_house(
            user,
            search=request.query_params.get('q'),
            agent_id=self.parse_uuid_optional(request.query_params.get('agent_id')),
            status=request.query_params.get('status') or None,
            limit=limit,
        )
        return Response(result)

    def post(self, request):
        user = self.get_user(request)
        input_data, _ = parse_deal_input(request.data)
        deal = create_deal(user, input_data)
        return Response({'ok': True, 'deal': deal_to_dict(deal)}, status=status.HTTP_201_CREATED)


class DealDetailView(AuthenticatedAPIView, APIView):
    """GET/PATCH/DELETE /api/deals/{id} - Deal CRUD operations."""

    permission_classes = [IsAuthenticated]

    def get(self, request, deal_id):
        user = self.get_user(request)
        deal_uuid = self.parse_uuid(deal_id, "deal_id")

        deal = get_deal_by_id(deal_uuid, user)
        if not deal:
            return Response(
                {'ok': False, 'error': 'Deal not found'},
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(deal)

    def patch(self, request, deal_id):
        user = self.get_user(request)
        deal_uuid = self.parse_uuid(deal_id, "deal_id")

        input_data, present = parse_deal_input(request.data, partial=True)
        deal = update_deal(deal_uuid, user, input_data, present)
        return Response({'ok': True, 'deal': deal_to_dict(deal)})

    def delete(self, request, deal_id):
        user = self.get_user(request)
        deal_uuid = self.parse_uuid(deal_id, "deal_id")

        delete_deal(deal_uuid, user)
        return Response({'ok': True})


class DealStatusView(AuthenticatedAPIView, APIView):
    """POST /api/deals/{id}/status - Move a deal to a new status."""

    permission_classes = [IsAuthenticated]

    def post(self, request, deal_id):
        user = self.get_user(request)
        deal_uuid = self.parse_uuid(deal_id, "deal_id")

        target = (request.data.get('status') or '').strip()
        if not target:
            return Response(
                {'ok': False, 'error': 'status is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        deal = update_deal_status(deal_uuid, user, target)
        return Response({'ok': True, 'deal': deal_to_dict(deal)})
