"""
Dashboard API URLs

All routes are relative to /api/dashboard/
"""
from django.urls import path

from . import views

urlpatterns = [
    path('', views.DashboardSummaryView.as_view(), name='dashboard_summary'),
    path('leaderboard', views.LeaderboardView.as_view(), name='dashboard_leaderboard'),
    path('my-agency', views.MyAgencyView.as_view(), name='dashboard_my_agency'),
]
