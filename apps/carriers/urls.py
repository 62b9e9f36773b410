"""
Carriers URL Configuration
"""
from django.urls import path

from .views import (
    CarrierDetailView,
    CarrierListCreateView,
    CarrierProductsView,
    ProductCompView,
    ProductDetailView,
)

urlpatterns = [
    path('', CarrierListCreateView.as_view(), name='carriers_list_create'),

    # Product endpoints (must come before <str:carrier_id>)
    path('products/<str:product_id>', ProductDetailView.as_view(), name='carrier_product_detail'),
    path('products/<str:product_id>/comp', ProductCompView.as_view(), name='carrier_product_comp'),

    path('<str:carrier_id>', CarrierDetailView.as_view(), name='carrier_detail'),
    path('<str:carrier_id>/products', CarrierProductsView.as_view(), name='carrier_products'),
]
