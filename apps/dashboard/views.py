"""
Dashboard API Views

Endpoints:
- GET /api/dashboard - Caller's today/week/month numbers
- GET /api/dashboard/leaderboard - Agency month-to-date leaderboard
- GET /api/dashboard/my-agency - Caller's tree production

All accept ?tz= (IANA zone, default America/New_York).
"""
import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.mixins import AuthenticatedAPIView
from apps.core.permissions import IsAuthenticated

from .services import get_dashboard_summary, get_leaderboard, get_my_agency

logger = logging.getLogger(__name__)


class DashboardSummaryView(AuthenticatedAPIView, APIView):
    """
    GET /api/dashboard

    Response (200):
        {
            "name": "Jane Doe",
            "date": "2026-03-04",
            "timezone": "America/New_York",
            "today": {"count": 1, "premium": 120.0, "ap": 1440.0},
            "week": {...},
            "month": {...}
        }
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = self.get_user(request)
        return Response(get_dashboard_summary(user, self.parse_timezone(request)))


class LeaderboardView(AuthenticatedAPIView, APIView):
    """GET /api/dashboard/leaderboard"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        self.get_user(request)
        return Response(get_leaderboard(self.parse_timezone(request)))


class MyAgencyView(AuthenticatedAPIView, APIView):
    """GET /api/dashboard/my-agency"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = self.get_user(request)
        return Response(get_my_agency(user, self.parse_timezone(request)))
