"""
Deal, FollowUp and DebtCase Factories
"""
import uuid
from datetime import timedelta
from decimal import Decimal

import factory
from django.utils import timezone
from faker import Faker

from apps.core.models import DebtCase, Deal, FollowUp
from tests.factories.core import BackdatedFactory, ProfileFactory

fake = Faker()


class DealFactory(BackdatedFactory):
    """Factory for Deal model."""

    class Meta:
        model = Deal

    id = factory.LazyFunction(uuid.uuid4)
    agent = factory.SubFactory(ProfileFactory)
    full_name = factory.LazyAttribute(lambda _: fake.name())
    phone = '(555)123-4567'
    company = 'Aetna'
    premium = Decimal('100.00')
    coverage = Decimal('10000.00')
    policy_number = factory.Sequence(lambda n: f'POL-{n:06d}')
    status = 'pending'


class FollowUpFactory(BackdatedFactory):
    """Factory for FollowUp model."""

    class Meta:
        model = FollowUp

    id = factory.LazyFunction(uuid.uuid4)
    agent = factory.SubFactory(ProfileFactory)
    full_name = factory.LazyAttribute(lambda _: fake.name())
    phone = '(555)987-6543'
    company = 'Transamerica'
    premium = Decimal('55.00')
    follow_up_at = factory.LazyFunction(lambda: timezone.now() + timedelta(days=1))
    status = 'open'


class DebtCaseFactory(BackdatedFactory):
    """Factory for DebtCase model."""

    class Meta:
        model = DebtCase

    id = factory.LazyFunction(uuid.uuid4)
    agent = factory.SubFactory(ProfileFactory)
    full_name = factory.LazyAttribute(lambda _: fake.name())
    creditor = 'Capital One'
    account_last4 = '1234'
    balance = Decimal('5000.00')
    monthly_payment = Decimal('150.00')
    status = 'open'
    source = 'Inbound'
