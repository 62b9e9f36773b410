"""
Integration Tests for the Deals API

Tests deal house functionality including:
1. Hierarchy scoping of the list and detail views
2. Posting deals and input validation
3. Edit/delete permissions (own, owner tree, admin)
4. Status transitions
"""
import uuid
from datetime import date

import pytest
from rest_framework import status

from apps.core.models import Deal
from tests.factories import DealFactory


@pytest.mark.django_db
class TestDealHouse:

    def test_agent_sees_own_and_downline(self, agent_client, agent_deal, sub_agent_deal, outsider_deal):
        response = agent_client.get('/api/deals/')

        assert response.status_code == status.HTTP_200_OK
        names = {d['full_name'] for d in response.json()['deals']}
        assert names == {'Jane Client', 'Sub Client'}

    def test_owner_sees_whole_tree(self, owner_client, agent_deal, sub_agent_deal, outsider_deal):
        response = owner_client.get('/api/deals/')

        assert response.json()['count'] == 2

    def test_admin_sees_everything(self, admin_client, agent_deal, sub_agent_deal, outsider_deal):
        response = admin_client.get('/api/deals/')

        assert response.json()['count'] == 3

    def test_rows_carry_ap_and_agent_name(self, agent_client, agent_deal):
        deal = agent_client.get('/api/deals/').json()['deals'][0]

        assert deal['premium'] == 100.0
        assert deal['ap'] == 1200.0
        assert deal['agent_name'] == 'Adam Agent'

    def test_search_by_company(self, agent_client, agent_deal, sub_agent_deal):
        response = agent_client.get('/api/deals/', {'q': 'sbli'})

        assert [d['full_name'] for d in response.json()['deals']] == ['Sub Client']

    def test_search_by_client_dob(self, agent, agent_client):
        DealFactory(agent=agent, full_name='Born Client', client_dob=date(1960, 5, 17))
        DealFactory(agent=agent, full_name='Other Client', client_dob=date(1970, 1, 1))

        response = agent_client.get('/api/deals/', {'q': '05/17/1960'})

        assert [d['full_name'] for d in response.json()['deals']] == ['Born Client']

    def test_status_filter(self, agent, agent_client, agent_deal):
        DealFactory(agent=agent, status='active')

        response = agent_client.get('/api/deals/', {'status': 'active'})

        assert response.json()['count'] == 1

    def test_legacy_note_fields_resolved(self, agent, agent_client):
        DealFactory(agent=agent, note='Product: Final Expense | Source: Inbound | Referrals: 2 | Notes: call after 5')

        deal = agent_client.get('/api/deals/').json()['deals'][0]

        assert deal['product_name'] == 'Final Expense'
        assert deal['source'] == 'Inbound'
        assert deal['referrals'] == 2


@pytest.mark.django_db
class TestDealDetail:

    def test_downline_deal_visible(self, agent_client, sub_agent_deal):
        response = agent_client.get(f'/api/deals/{sub_agent_deal.id}')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['full_name'] == 'Sub Client'

    def test_other_tree_hidden(self, agent_client, outsider_deal):
        response = agent_client.get(f'/api/deals/{outsider_deal.id}')

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestPostDeal:

    def test_create_deal(self, agent, agent_client):
        response = agent_client.post('/api/deals/', {
            'full_name': 'New Client',
            'phone': '888-888-8888',
            'company': 'Aetna',
            'premium': '$85.50',
            'coverage': '10,000',
            'beneficiary_relationship': 'spouse',
            'source': 'Referral',
            'referrals': 3,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()['deal']
        assert body['status'] == 'pending'
        assert body['phone'] == '(888)888-8888'
        assert body['premium'] == 85.5
        assert body['coverage'] == 10000.0
        assert Deal.objects.get(id=body['id']).agent_id == agent.id

    def test_name_required(self, agent_client):
        response = agent_client.post('/api/deals/', {'premium': 50}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['details'] == {'full_name': 'required'}

    def test_negative_premium_rejected(self, agent_client):
        response = agent_client.post('/api/deals/', {'full_name': 'X', 'premium': '-5'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error'] == 'Premium must be a number of 0 or more'

    def test_unknown_source_rejected(self, agent_client):
        response = agent_client.post(
            '/api/deals/', {'full_name': 'X', 'premium': 10, 'source': 'Billboard'}, format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestEditDeal:

    def test_agent_edits_own_deal(self, agent_client, agent_deal):
        response = agent_client.patch(f'/api/deals/{agent_deal.id}', {'premium': '120'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        agent_deal.refresh_from_db()
        assert float(agent_deal.premium) == 120.0

    def test_agent_cannot_edit_downline_deal(self, agent_client, sub_agent_deal):
        response = agent_client.patch(f'/api/deals/{sub_agent_deal.id}', {'premium': '1'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_owner_edits_tree_deal(self, owner_client, sub_agent_deal):
        response = owner_client.patch(f'/api/deals/{sub_agent_deal.id}', {'note': 'checked'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['deal']['note'] == 'checked'

    def test_owner_cannot_edit_other_tree(self, owner_client, outsider_deal):
        response = owner_client.delete(f'/api/deals/{outsider_deal.id}')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Deal.objects.filter(id=outsider_deal.id).exists()

    def test_clearing_name_rejected(self, agent_client, agent_deal):
        response = agent_client.patch(f'/api/deals/{agent_deal.id}', {'full_name': ''}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_admin_deletes_any_deal(self, admin_client, outsider_deal):
        response = admin_client.delete(f'/api/deals/{outsider_deal.id}')

        assert response.status_code == status.HTTP_200_OK
        assert not Deal.objects.filter(id=outsider_deal.id).exists()

    def test_delete_missing_deal(self, admin_client):
        response = admin_client.delete(f'/api/deals/{uuid.uuid4()}')

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestDealStatus:

    def test_pending_to_active(self, agent_client, agent_deal):
        response = agent_client.post(f'/api/deals/{agent_deal.id}/status', {'status': 'active'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['deal']['status'] == 'active'

    def test_declined_is_terminal(self, agent, agent_client):
        deal = DealFactory(agent=agent, status='declined')

        response = agent_client.post(f'/api/deals/{deal.id}/status', {'status': 'active'}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()['details']['allowed'] == []

    def test_lapsed_can_reactivate(self, agent, agent_client):
        deal = DealFactory(agent=agent, status='lapsed')

        response = agent_client.post(f'/api/deals/{deal.id}/status', {'status': 'active'}, format='json')

        assert response.status_code == status.HTTP_200_OK

    def test_unknown_status(self, agent_client, agent_deal):
        response = agent_client.post(f'/api/deals/{agent_deal.id}/status', {'status': 'won'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_status_required(self, agent_client, agent_deal):
        response = agent_client.post(f'/api/deals/{agent_deal.id}/status', {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
