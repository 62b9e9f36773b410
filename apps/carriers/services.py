"""
Carrier Services

Carrier, product and comp-table maintenance. Admin only; the views enforce
that before calling in.
"""
import logging
from decimal import Decimal
from uuid import UUID

from django.db import transaction

from apps.core.constants import (
    COMP_LEVELS_A,
    COMP_LEVELS_B,
    COMP_SCHEDULE_B_KEYWORDS,
    DEFAULT_ADVANCE_RATE,
    DEFAULT_CARRIER_SORT_ORDER,
)
from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.models import Carrier, CarrierProduct, CarrierProductComp
from apps.core.validators import clean_amount, clean_int, clean_phone, clean_text

logger = logging.getLogger(__name__)

CARRIER_FIELDS = [
    'name', 'supported_name', 'advance_rate', 'active', 'sort_order',
    'eapp_url', 'portal_url', 'support_phone', 'logo_url',
]


def comp_levels_for_schema(schema: str) -> list[int]:
    if schema == 'A':
        return list(COMP_LEVELS_A)
    if schema == 'B':
        return list(COMP_LEVELS_B)
    raise ValidationError("schema must be 'A' or 'B'", details={'schema': 'invalid choice'})


def comp_schema_for_product(name: str | None) -> str:
    """Preferred and standard tiers pay on schedule B, everything else on A."""
    lowered = (name or '').lower()
    if any(keyword in lowered for keyword in COMP_SCHEDULE_B_KEYWORDS):
        return 'B'
    return 'A'


def _clean_bool(value, default: bool = True) -> bool:
    if value in (None, ''):
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def parse_carrier_input(data: dict, partial: bool = False) -> dict:
    if hasattr(data, 'dict'):
        data = data.dict()

    names = [name for name in CARRIER_FIELDS if name in data] if partial else CARRIER_FIELDS
    values = {}

    for name in names:
        raw = data.get(name)
        if name == 'name':
            values[name] = clean_text(raw, 'name', required=True)
        elif name == 'advance_rate':
            rate = clean_amount(raw, 'advance_rate')
            if rate is None:
                rate = Decimal(str(DEFAULT_ADVANCE_RATE))
            if rate <= 0:
                raise ValidationError('Advance rate must be greater than 0', details={'advance_rate': 'too small'})
            values[name] = rate
        elif name == 'active':
            values[name] = _clean_bool(raw)
        elif name == 'sort_order':
            order = clean_int(raw, 'sort_order', min_value=0)
            values[name] = DEFAULT_CARRIER_SORT_ORDER if order is None else order
        elif name == 'support_phone':
            values[name] = clean_phone(raw) or clean_text(raw, 'support_phone', max_length=50)
        elif name in ('eapp_url', 'portal_url', 'logo_url'):
            values[name] = clean_text(raw, name, max_length=2000)
        else:
            values[name] = clean_text(raw, name)

    return values


def create_carrier(values: dict) -> Carrier:
    carrier = Carrier.objects.create(**values)
    logger.info(f'Carrier {carrier.id} created: {carrier.name}')
    return carrier


def update_carrier(carrier_id: UUID, values: dict) -> Carrier:
    carrier = Carrier.objects.filter(id=carrier_id).first()
    if not carrier:
        raise NotFoundError('Carrier not found')
    for name, value in values.items():
        setattr(carrier, name, value)
    if values:
        carrier.save(update_fields=list(values))
        logger.info(f'Carrier {carrier.id} updated: {sorted(values)}')
    return carrier


@transaction.atomic
def create_product(carrier_id: UUID, name: str | None, schema: str | None = None) -> CarrierProduct:
    """
    Add a product and seed blank comp rows for its schedule.

    schema defaults to the one implied by the product name.
    """
    carrier = Carrier.objects.filter(id=carrier_id).first()
    if not carrier:
        raise NotFoundError('Carrier not found')

    product_name = clean_text(name, 'name', required=True)
    levels = comp_levels_for_schema(schema or comp_schema_for_product(product_name))

    product = CarrierProduct.objects.create(carrier=carrier, name=product_name)
    CarrierProductComp.objects.bulk_create([
        CarrierProductComp(product=product, comp_level=level, rate=None) for level in levels
    ])
    logger.info(f'Product {product.id} ({product_name}) added to carrier {carrier.id} with {len(levels)} comp levels')
    return product


def delete_product(product_id: UUID) -> None:
    deleted, _ = CarrierProduct.objects.filter(id=product_id).delete()
    if not deleted:
        raise NotFoundError('Product not found')
    logger.info(f'Product {product_id} deleted')


def save_comp_rate(product_id: UUID, comp_level, rate) -> CarrierProductComp:
    """Upsert the rate for one (product, comp level) cell. Blank clears it."""
    if not CarrierProduct.objects.filter(id=product_id).exists():
        raise NotFoundError('Product not found')

    level = clean_int(comp_level, 'comp_level', min_value=0, max_value=200)
    if level is None:
        raise ValidationError('comp_level is required', details={'comp_level': 'required'})
    cleaned_rate = clean_amount(rate, 'rate', min_value=Decimal('0'))

    comp, created = CarrierProductComp.objects.update_or_create(
        product_id=product_id,
        comp_level=level,
        defaults={'rate': cleaned_rate},
    )
    logger.debug(f'Comp rate {"created" if created else "updated"}: product {product_id} level {level} = {cleaned_rate}')
    return comp
