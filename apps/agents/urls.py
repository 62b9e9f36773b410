"""
Agents API URLs

All routes are relative to /api/agents/
"""
from django.urls import path

from . import views

urlpatterns = [
    path('', views.AgentsListView.as_view(), name='agents_list'),
    path('upline-options', views.UplineOptionsView.as_view(), name='agent_upline_options'),
    path('<str:agent_id>', views.AgentDetailView.as_view(), name='agent_detail'),
    path('<str:agent_id>/position', views.AgentPositionView.as_view(), name='agent_position'),
]
