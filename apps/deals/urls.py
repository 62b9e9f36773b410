"""
Deals URL Configuration
"""
from django.urls import path

from .views import DealDetailView, DealsListCreateView, DealStatusView

urlpatterns = [
    path('', DealsListCreateView.as_view(), name='deals_list_create'),
    path('<str:deal_id>', DealDetailView.as_view(), name='deal_detail'),
    path('<str:deal_id>/status', DealStatusView.as_view(), name='deal_status'),
]
