"""
Integration Tests for the Debt Cases API
"""
from decimal import Decimal

import pytest
from rest_framework import status

from apps.core.models import DebtCase
from tests.conftest import client_for
from tests.factories import DebtCaseFactory


@pytest.mark.django_db
class TestDebtCaseList:

    def test_list_with_totals(self, agent, agent_client, agent_debt_case):
        DebtCaseFactory(agent=agent, balance=Decimal('1000.00'), monthly_payment=Decimal('50.00'))

        response = agent_client.get('/api/debt-cases/')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['count'] == 2
        assert body['totals'] == {'balance': 6000.0, 'monthly_payment': 200.0}

    def test_search_and_status_filter(self, agent, agent_client, agent_debt_case):
        DebtCaseFactory(agent=agent, full_name='Sally Settled', status='settled')

        by_creditor = agent_client.get('/api/debt-cases/', {'q': 'chase'}).json()
        by_status = agent_client.get('/api/debt-cases/', {'status': 'settled'}).json()

        assert [c['full_name'] for c in by_creditor['cases']] == ['Debbie Debtor']
        assert [c['full_name'] for c in by_status['cases']] == ['Sally Settled']

    def test_agent_does_not_see_downline_cases(self, agent_client, sub_agent):
        DebtCaseFactory(agent=sub_agent)

        assert agent_client.get('/api/debt-cases/').json()['count'] == 0


@pytest.mark.django_db
class TestDebtCaseWrites:

    def test_create(self, agent, agent_client):
        response = agent_client.post('/api/debt-cases/', {
            'full_name': 'Carl Card',
            'creditor': 'Discover',
            'account_last4': '98-76',
            'balance': '$2,500',
            'monthly_payment': '75',
            'source': 'Referral',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        case = response.json()['case']
        assert case['status'] == 'open'
        assert case['account_last4'] == '9876'
        assert case['balance'] == 2500.0
        assert DebtCase.objects.get(id=case['id']).agent_id == agent.id

    def test_balance_required(self, agent_client):
        response = agent_client.post('/api/debt-cases/', {
            'full_name': 'Carl Card', 'creditor': 'Discover',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error'] == 'Balance must be a valid number'

    def test_bad_last4(self, agent_client):
        response = agent_client.post('/api/debt-cases/', {
            'full_name': 'Carl Card', 'creditor': 'Discover', 'balance': 10, 'account_last4': '12',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_any_status_can_be_set(self, agent_client, agent_debt_case):
        for target in ('lost', 'open', 'charged_off'):
            response = agent_client.patch(
                f'/api/debt-cases/{agent_debt_case.id}', {'status': target}, format='json',
            )
            assert response.status_code == status.HTTP_200_OK
            assert response.json()['case']['status'] == target

    def test_partial_update_keeps_other_fields(self, agent_client, agent_debt_case):
        agent_client.patch(f'/api/debt-cases/{agent_debt_case.id}', {'note': 'called'}, format='json')

        agent_debt_case.refresh_from_db()
        assert agent_debt_case.note == 'called'
        assert agent_debt_case.creditor == 'Chase'

    def test_owner_can_edit_tree_case(self, owner_client, agent_debt_case):
        response = owner_client.patch(
            f'/api/debt-cases/{agent_debt_case.id}', {'balance': '10'}, format='json',
        )

        assert response.status_code == status.HTTP_200_OK

    def test_outsider_cannot_delete(self, outsider, agent_debt_case):
        response = client_for(outsider).delete(f'/api/debt-cases/{agent_debt_case.id}')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete(self, agent_client, agent_debt_case):
        response = agent_client.delete(f'/api/debt-cases/{agent_debt_case.id}')

        assert response.status_code == status.HTTP_200_OK
        assert not DebtCase.objects.filter(id=agent_debt_case.id).exists()
