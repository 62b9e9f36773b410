"""
URL Configuration for Flow Backend API

All routes are prefixed with /api/ to match Next.js conventions.
"""
from django.urls import include, path

from apps.agents.user_urls import admin_urlpatterns
from apps.core.views import health_check

urlpatterns = [
    # Health check endpoint (public)
    path('api/health', health_check, name='health_check'),

    # User profile endpoints
    path('api/user/', include('apps.agents.user_urls')),

    # Invites (admins and agency owners)
    path('api/admin/', include(admin_urlpatterns)),

    # Agents directory and admin edits
    path('api/agents/', include('apps.agents.urls')),

    # Dashboard, leaderboard and my agency
    path('api/dashboard/', include('apps.dashboard.urls')),

    # Deal house and posting
    path('api/deals/', include('apps.deals.urls')),

    # Follow-ups
    path('api/follow-ups/', include('apps.follow_ups.urls')),

    # Debt management
    path('api/debt-cases/', include('apps.debt_cases.urls')),

    # Carriers and comp tables (admin settings)
    path('api/carriers/', include('apps.carriers.urls')),

    # Analytics
    path('api/analytics/', include('apps.analytics.urls')),

    # Scheduled report jobs (CRON_SECRET or admin JWT)
    path('api/cron/', include('apps.reports.urls')),

    # Webhooks
    path('api/webhooks/', include('apps.webhooks.urls')),
]
