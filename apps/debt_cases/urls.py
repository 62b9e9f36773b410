"""
Debt Cases URL Configuration
"""
from django.urls import path

from .views import DebtCaseDetailView, DebtCaseListCreateView

urlpatterns = [
    path('', DebtCaseListCreateView.as_view(), name='debt_cases_list_create'),
    path('<str:case_id>', DebtCaseDetailView.as_view(), name='debt_case_detail'),
]
