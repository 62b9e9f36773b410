"""
Integration Tests for the Analytics API
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from rest_framework import status

from tests.factories import DealFactory

# Monday and Wednesday noon in New York
MON = datetime(2026, 3, 2, 17, 0, tzinfo=timezone.utc)
WED = datetime(2026, 3, 4, 17, 0, tzinfo=timezone.utc)
OUTSIDE = datetime(2026, 3, 9, 17, 0, tzinfo=timezone.utc)

WEEK = {'preset': 'custom', 'start': '2026-03-02', 'end': '2026-03-08', 'tz': 'America/New_York'}


@pytest.fixture
def week_deals(agent, sub_agent, outsider):
    DealFactory(agent=agent, premium=Decimal('50'), company='Aetna', created_at=MON)
    DealFactory(agent=agent, premium=Decimal('150'), company='Aetna', created_at=WED)
    DealFactory(agent=sub_agent, premium=Decimal('25'), company='SBLI', created_at=WED)
    DealFactory(agent=agent, premium=Decimal('999'), created_at=OUTSIDE)
    DealFactory(agent=outsider, premium=Decimal('500'), created_at=WED)


@pytest.mark.django_db
class TestAnalytics:

    def test_team_report(self, agent_client, week_deals):
        response = agent_client.get('/api/analytics/', WEEK)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['scope'] == 'team'
        assert body['summary']['deals_count'] == 3
        assert body['summary']['total_ap'] == 2700.0
        assert body['top_carrier'] == 'Aetna'
        assert len(body['daily']) == 7
        assert body['daily'][2]['premium'] == 175.0

    def test_agent_rollup_gap(self, agent_client, agent, week_deals):
        body = agent_client.get('/api/analytics/', WEEK).json()

        row = next(r for r in body['agents'] if r['agent_id'] == str(agent.id))
        assert row['ap'] == 2400.0
        assert row['avg_gap_label'] == '2d'

    def test_admin_report_is_unscoped(self, admin_client, week_deals):
        body = admin_client.get('/api/analytics/', WEEK).json()

        assert body['scope'] == 'all'
        assert body['summary']['deals_count'] == 4

    def test_single_agent_filter(self, owner_client, sub_agent, week_deals):
        body = owner_client.get('/api/analytics/', {**WEEK, 'agent_id': str(sub_agent.id)}).json()

        assert body['summary']['deals_count'] == 1
        assert body['summary']['total_premium'] == 25.0

    def test_agent_outside_scope_forbidden(self, agent_client, outsider, week_deals):
        response = agent_client.get('/api/analytics/', {**WEEK, 'agent_id': str(outsider.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_non_writers_listed(self, owner_client, week_deals):
        body = owner_client.get('/api/analytics/', WEEK).json()

        assert [p['name'] for p in body['non_writers']] == ['Olivia Owner']

    def test_invalid_preset(self, agent_client):
        response = agent_client.get('/api/analytics/', {'preset': 'fortnight'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_custom_requires_dates(self, agent_client):
        response = agent_client.get('/api/analytics/', {'preset': 'custom'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_timezone(self, agent_client):
        response = agent_client.get('/api/analytics/', {'tz': 'Mars/Olympus'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_empty_window(self, agent_client):
        body = agent_client.get('/api/analytics/', WEEK).json()

        assert body['summary']['total_ap'] == 0
        assert body['top_carrier'] == '—'
        assert body['averages']['avg_gap_label'] == '—'
