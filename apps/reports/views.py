"""
Cron API Views

Endpoints (GET or POST):
- /api/cron/leaderboard - Weekly running AP leaderboard to Discord
- /api/cron/daily-leaderboard - Daily writers leaderboard to Discord (?force=1, ?manual=1, ?dry=1)
- /api/cron/agency-email - Per-owner agency scoreboard email

Authenticated with CRON_SECRET (X-Cron-Secret header, ?secret=, or
Authorization: Bearer <secret>) or an admin JWT.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.authentication import CronSecretAuthentication, SupabaseJWTAuthentication
from apps.core.exceptions import APIException
from apps.core.mixins import AuthenticatedAPIView
from apps.core.permissions import IsAdmin, IsAuthenticated

from .services import run_agency_emails, run_daily_leaderboard, run_weekly_leaderboard

logger = logging.getLogger(__name__)


def _flag(request, name: str) -> bool:
    return request.query_params.get(name) == '1'


class CronJobView(AuthenticatedAPIView, APIView):
    """Runs one report job; subclasses implement run()."""

    authentication_classes = [CronSecretAuthentication, SupabaseJWTAuthentication]
    permission_classes = [IsAuthenticated, IsAdmin]
    job_name = 'cron'

    def run(self, request) -> dict:
        raise NotImplementedError

    def get(self, request):
        user = self.get_user(request)
        logger.info(f'Cron job {self.job_name} triggered by {"scheduler" if user.is_system else user.id}')

        try:
            return Response(self.run(request))
        except APIException:
            raise
        except Exception as e:
            logger.exception(f'Cron job {self.job_name} failed: {e}')
            return Response(
                {'ok': False, 'error': 'cron failed', 'detail': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    def post(self, request):
        return self.get(request)


class WeeklyLeaderboardView(CronJobView):
    job_name = 'leaderboard'

    def run(self, request) -> dict:
        return run_weekly_leaderboard()


class DailyLeaderboardView(CronJobView):
    job_name = 'daily-leaderboard'

    def run(self, request) -> dict:
        return run_daily_leaderboard(
            force=_flag(request, 'force'),
            manual=_flag(request, 'manual'),
            dry=_flag(request, 'dry'),
        )


class AgencyEmailView(CronJobView):
    job_name = 'agency-email'

    def run(self, request) -> dict:
        return run_agency_emails()
