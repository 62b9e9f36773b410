"""
Integration Test Fixtures

Real database records built with Factory Boy on top of the profile tree
from tests/conftest.py:

    owner <- agent <- sub_agent        outsider        admin
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from tests.factories import DealFactory, DebtCaseFactory, FollowUpFactory


# =============================================================================
# Deal Fixtures
# =============================================================================

@pytest.fixture
def agent_deal(agent):
    """Pending deal written by the agent."""
    return DealFactory(agent=agent, full_name='Jane Client', premium=Decimal('100.00'))


@pytest.fixture
def sub_agent_deal(sub_agent):
    return DealFactory(agent=sub_agent, full_name='Sub Client', premium=Decimal('50.00'), company='SBLI')


@pytest.fixture
def outsider_deal(outsider):
    return DealFactory(agent=outsider, full_name='Hidden Client', premium=Decimal('75.00'))


# =============================================================================
# Follow-Up Fixtures
# =============================================================================

@pytest.fixture
def due_follow_up(agent):
    """Open follow-up that came due an hour ago."""
    return FollowUpFactory(agent=agent, full_name='Due Dana', follow_up_at=timezone.now() - timedelta(hours=1))


@pytest.fixture
def future_follow_up(agent):
    return FollowUpFactory(agent=agent, full_name='Later Larry', follow_up_at=timezone.now() + timedelta(days=3))


# =============================================================================
# Debt Case Fixtures
# =============================================================================

@pytest.fixture
def agent_debt_case(agent):
    return DebtCaseFactory(agent=agent, full_name='Debbie Debtor', creditor='Chase')
