"""
Follow-Ups URL Configuration
"""
from django.urls import path

from .views import DueFollowUpsView, FollowUpActionView, FollowUpDetailView, FollowUpListCreateView

urlpatterns = [
    path('', FollowUpListCreateView.as_view(), name='follow_ups_list_create'),
    path('due', DueFollowUpsView.as_view(), name='follow_ups_due'),
    path('<str:follow_up_id>', FollowUpDetailView.as_view(), name='follow_up_detail'),
    path('<str:follow_up_id>/reschedule', FollowUpActionView.as_view(action='reschedule'), name='follow_up_reschedule'),
    path('<str:follow_up_id>/complete', FollowUpActionView.as_view(action='complete'), name='follow_up_complete'),
    path('<str:follow_up_id>/deny', FollowUpActionView.as_view(action='deny'), name='follow_up_deny'),
    path('<str:follow_up_id>/convert', FollowUpActionView.as_view(action='convert'), name='follow_up_convert'),
]
