"""
Carrier Selectors
"""
from uuid import UUID

from django.db.models import Q

from apps.core.models import Carrier, CarrierProduct, CarrierProductComp

from .services import comp_levels_for_schema, comp_schema_for_product


def serialize_carrier(carrier: Carrier) -> dict:
    return {
        'id': str(carrier.id),
        'name': carrier.name,
        'supported_name': carrier.supported_name,
        'advance_rate': float(carrier.advance_rate) if carrier.advance_rate is not None else None,
        'active': carrier.active,
        'sort_order': carrier.sort_order,
        'eapp_url': carrier.eapp_url,
        'portal_url': carrier.portal_url,
        'support_phone': carrier.support_phone,
        'logo_url': carrier.logo_url,
        'created_at': carrier.created_at.isoformat() if carrier.created_at else None,
    }


def get_carriers(search: str | None = None, active_only: bool = False) -> list[dict]:
    queryset = Carrier.objects.all()
    term = (search or '').strip()
    if term:
        queryset = queryset.filter(Q(name__icontains=term) | Q(supported_name__icontains=term))
    if active_only:
        queryset = queryset.filter(active=True)
    return [serialize_carrier(c) for c in queryset.order_by('sort_order', 'name')]


def get_carrier_detail(carrier_id: UUID) -> dict | None:
    """
    Carrier with its products and each product's comp table.

    Every level of the product's schedule is listed; levels with no saved
    row come back with rate None.
    """
    carrier = Carrier.objects.filter(id=carrier_id).first()
    if not carrier:
        return None

    products = list(CarrierProduct.objects.filter(carrier=carrier).order_by('name'))
    rates: dict = {}
    for comp in CarrierProductComp.objects.filter(product__in=products):
        rates[(comp.product_id, comp.comp_level)] = comp.rate

    product_rows = []
    for product in products:
        schema = comp_schema_for_product(product.name)
        saved_levels = {level for (pid, level) in rates if pid == product.id}
        levels = sorted(set(comp_levels_for_schema(schema)) | saved_levels, reverse=True)
        product_rows.append({
            'id': str(product.id),
            'name': product.name,
            'schema': schema,
            'comp': [
                {
                    'comp_level': level,
                    'rate': float(rates[(product.id, level)]) if rates.get((product.id, level)) is not None else None,
                }
                for level in levels
            ],
        })

    data = serialize_carrier(carrier)
    data['products'] = product_rows
    return data
