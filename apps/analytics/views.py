"""
Analytics API Views

Endpoints:
- GET /api/analytics - Team analytics for a date range

Query params:
    preset: this_week | last_7 | this_month | custom (default: this_week)
    start, end: YYYY-MM-DD, required for custom
    tz: IANA zone for day boundaries (default: America/New_York)
    agent_id: Optional agent UUID to narrow the report
"""
import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.constants import RANGE_PRESETS
from apps.core.dates import resolve_range
from apps.core.exceptions import ValidationError
from apps.core.mixins import AuthenticatedAPIView
from apps.core.permissions import IsAuthenticated

from .selectors import get_analytics

logger = logging.getLogger(__name__)


class AnalyticsView(AuthenticatedAPIView, APIView):
    """GET /api/analytics"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = self.get_user(request)
        tz = self.parse_timezone(request)

        preset = request.query_params.get('preset') or 'this_week'
        if preset not in RANGE_PRESETS:
            raise ValidationError(
                f'preset must be one of: {", ".join(RANGE_PRESETS)}',
                details={'preset': 'invalid choice'},
            )

        try:
            date_range = resolve_range(
                preset,
                tz,
                start_date=self.parse_date(request.query_params.get('start')),
                end_date=self.parse_date(request.query_params.get('end')),
            )
        except ValueError as err:
            raise ValidationError(str(err)) from err

        report = get_analytics(
            user,
            date_range,
            agent_id=self.parse_uuid_optional(request.query_params.get('agent_id')),
        )
        return Response(report)
