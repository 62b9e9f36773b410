"""
Core Model Factories

Factories for Profile, Carrier, CarrierProduct and CarrierProductComp.
"""
import uuid
from decimal import Decimal

import factory
from faker import Faker

from apps.core.models import Carrier, CarrierProduct, CarrierProductComp, Profile

fake = Faker()


class BackdatedFactory(factory.django.DjangoModelFactory):
    """
    Lets tests pass created_at even though the column is auto_now_add.
    """

    class Meta:
        abstract = True

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        created_at = kwargs.pop('created_at', None)
        obj = super()._create(model_class, *args, **kwargs)
        if created_at is not None:
            model_class.objects.filter(pk=obj.pk).update(created_at=created_at)
            obj.created_at = created_at
        return obj


class ProfileFactory(BackdatedFactory):
    """Factory for Profile model."""

    class Meta:
        model = Profile

    id = factory.LazyFunction(uuid.uuid4)
    email = factory.LazyAttribute(lambda _: fake.unique.email())
    first_name = factory.LazyAttribute(lambda _: fake.first_name())
    last_name = factory.LazyAttribute(lambda _: fake.last_name())
    role = 'agent'
    is_agency_owner = False
    upline = None
    comp = 70
    theme = 'blue'


class CarrierFactory(BackdatedFactory):
    """Factory for Carrier model."""

    class Meta:
        model = Carrier

    id = factory.LazyFunction(uuid.uuid4)
    name = factory.Sequence(lambda n: f'{fake.company()} Life {n}')
    advance_rate = Decimal('0.75')
    active = True
    sort_order = 999


class CarrierProductFactory(BackdatedFactory):
    """Factory for CarrierProduct model."""

    class Meta:
        model = CarrierProduct

    id = factory.LazyFunction(uuid.uuid4)
    carrier = factory.SubFactory(CarrierFactory)
    name = 'Final Expense Modified'


class CarrierProductCompFactory(factory.django.DjangoModelFactory):
    """Factory for CarrierProductComp model."""

    class Meta:
        model = CarrierProductComp

    id = factory.LazyFunction(uuid.uuid4)
    product = factory.SubFactory(CarrierProductFactory)
    comp_level = 100
    rate = None
