"""
Webhook URL Configuration

Routes:
- POST /api/webhooks/deal-posted - Discord announcement for a posted deal
"""
from django.urls import path

from .views import DealPostedWebhookView

urlpatterns = [
    path('deal-posted', DealPostedWebhookView.as_view(), name='deal_posted_webhook'),
]
