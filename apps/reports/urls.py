"""
Cron URL Configuration

All routes are relative to /api/cron/
"""
from django.urls import path

from .views import AgencyEmailView, DailyLeaderboardView, WeeklyLeaderboardView

urlpatterns = [
    path('leaderboard', WeeklyLeaderboardView.as_view(), name='cron_weekly_leaderboard'),
    path('daily-leaderboard', DailyLeaderboardView.as_view(), name='cron_daily_leaderboard'),
    path('agency-email', AgencyEmailView.as_view(), name='cron_agency_email'),
]
