"""
Webhook Views

Endpoints:
- POST /api/webhooks/deal-posted - Announce a freshly posted deal on Discord
"""
import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import ValidationError
from apps.core.mixins import AuthenticatedAPIView
from apps.core.permissions import IsAuthenticated

from .services import notify_deal_posted

logger = logging.getLogger(__name__)


class DealPostedWebhookView(AuthenticatedAPIView, APIView):
    """
    POST /api/webhooks/deal-posted

    Request body:
        {"deal_id": "uuid"}

    Response (200):
        {"ok": true} or {"ok": true, "skipped": true} when no webhook is set

    Errors: 400 missing deal_id, 403 not the caller's deal, 404 unknown
    deal, 502 Discord rejected the message.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        user = self.get_user(request)
        deal_id = str(request.data.get('deal_id') or '').strip()
        if not deal_id:
            raise ValidationError('Missing deal_id', details={'deal_id': 'required'})
        return Response(notify_deal_posted(user, deal_id))
