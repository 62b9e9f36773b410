"""
Carriers API Views (admin settings)

Endpoints:
- GET /api/carriers - List carriers
- POST /api/carriers - Create a carrier
- GET /api/carriers/{id} - Carrier with products and comp tables
- PATCH /api/carriers/{id} - Update a carrier
- POST /api/carriers/{id}/products - Add a product (seeds comp rows)
- DELETE /api/carriers/products/{product_id} - Remove a product
- PUT /api/carriers/products/{product_id}/comp - Save one comp rate
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.constants import SUPPORTED_CARRIERS
from apps.core.mixins import AuthenticatedAPIView
from apps.core.permissions import IsAdmin, IsAuthenticated

from .selectors import get_carrier_detail, get_carriers, serialize_carrier
from .services import (
    create_carrier,
    create_product,
    delete_product,
    parse_carrier_input,
    save_comp_rate,
    update_carrier,
)

logger = logging.getLogger(__name__)


class CarrierListCreateView(AuthenticatedAPIView, APIView):
    """GET/POST /api/carriers"""

    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        carriers = get_carriers(
            search=request.query_params.get('q'),
            active_only=request.query_params.get('active') == '1',
        )
        return Response({'carriers': carriers, 'supported': SUPPORTED_CARRIERS})

    def post(self, request):
        values = parse_carrier_input(request.data)
        carrier = create_carrier(values)
        return Response({'ok': True, 'carrier': serialize_carrier(carrier)}, status=status.HTTP_201_CREATED)


class CarrierDetailView(AuthenticatedAPIView, APIView):
    """GET/PATCH /api/carriers/{id}"""

    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request, carrier_id):
        detail = get_carrier_detail(self.parse_uuid(carrier_id, 'carrier_id'))
        if not detail:
            return Response(
                {'ok': False, 'error': 'Carrier not found'},
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(detail)

    def patch(self, request, carrier_id):
        values = parse_carrier_input(request.data, partial=True)
        carrier = update_carrier(self.parse_uuid(carrier_id, 'carrier_id'), values)
        return Response({'ok': True, 'carrier': serialize_carrier(carrier)})


class CarrierProductsView(AuthenticatedAPIView, APIView):
    """POST /api/carriers/{id}/products"""

    permission_classes = [IsAuthenticated, IsAdmin]

    def post(self, request, carrier_id):
        product = create_product(
            self.parse_uuid(carrier_id, 'carrier_id'),
            request.data.get('name'),
            schema=request.data.get('schema') or None,
        )
        detail = get_carrier_detail(product.carrier_id)
        return Response(
            {'ok': True, 'product_id': str(product.id), 'carrier': detail},
            status=status.HTTP_201_CREATED
        )


class ProductDetailView(AuthenticatedAPIView, APIView):
    """DELETE /api/carriers/products/{product_id}"""

    permission_classes = [IsAuthenticated, IsAdmin]

    def delete(self, request, product_id):
        delete_product(self.parse_uuid(product_id, 'product_id'))
        return Response({'ok': True})


class ProductCompView(AuthenticatedAPIView, APIView):
    """PUT /api/carriers/products/{product_id}/comp"""

    permission_classes = [IsAuthenticated, IsAdmin]

    def put(self, request, product_id):
        comp = save_comp_rate(
            self.parse_uuid(product_id, 'product_id'),
            request.data.get('comp_level'),
            request.data.get('rate'),
        )
        return Response({
            'ok': True,
            'comp': {
                'product_id': str(comp.product_id),
                'comp_level': comp.comp_level,
                'rate': float(comp.rate) if comp.rate is not None else None,
            },
        })
