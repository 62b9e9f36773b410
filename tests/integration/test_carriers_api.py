"""
Integration Tests for the Carriers API (admin settings)
"""
import uuid
from decimal import Decimal

import pytest
from rest_framework import status

from apps.core.models import Carrier, CarrierProduct, CarrierProductComp
from tests.factories import CarrierFactory, CarrierProductFactory


@pytest.mark.django_db
class TestCarrierAccess:

    def test_agents_locked_out(self, agent_client):
        response = agent_client.get('/api/carriers/')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_owners_locked_out(self, owner_client):
        response = owner_client.post('/api/carriers/', {'name': 'Nope'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Carrier.objects.exists()


@pytest.mark.django_db
class TestCarriers:

    def test_list_sorted_with_supported_names(self, admin_client):
        CarrierFactory(name='Zeta Life', sort_order=1)
        CarrierFactory(name='Alpha Life', sort_order=2)

        response = admin_client.get('/api/carriers/')

        assert response.status_code == status.HTTP_200_OK
        assert [c['name'] for c in response.json()['carriers']] == ['Zeta Life', 'Alpha Life']
        assert 'Aetna' in response.json()['supported']

    def test_create_with_defaults(self, admin_client):
        response = admin_client.post('/api/carriers/', {
            'name': 'Aetna', 'support_phone': '800 555 1212',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        carrier = response.json()['carrier']
        assert carrier['advance_rate'] == 0.75
        assert carrier['sort_order'] == 999
        assert carrier['active'] is True
        assert carrier['support_phone'] == '(800)555-1212'

    def test_name_required(self, admin_client):
        response = admin_client.post('/api/carriers/', {'advance_rate': '0.8'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_advance_rate_must_be_positive(self, admin_client):
        response = admin_client.post('/api/carriers/', {'name': 'X', 'advance_rate': '0'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update(self, admin_client):
        carrier = CarrierFactory(name='Old Name')

        response = admin_client.patch(f'/api/carriers/{carrier.id}', {'active': False}, format='json')

        assert response.status_code == status.HTTP_200_OK
        carrier.refresh_from_db()
        assert carrier.active is False
        assert carrier.name == 'Old Name'

    def test_detail_missing(self, admin_client):
        response = admin_client.get(f'/api/carriers/{uuid.uuid4()}')

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestProductsAndComp:

    def test_schedule_a_product_seeds_levels(self, admin_client):
        carrier = CarrierFactory()

        response = admin_client.post(
            f'/api/carriers/{carrier.id}/products', {'name': 'Final Expense Level'}, format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        product = response.json()['carrier']['products'][0]
        assert product['schema'] == 'A'
        assert [row['comp_level'] for row in product['comp']] == [115, 105, 100, 95, 90, 85, 80, 75, 70, 65, 60]
        assert all(row['rate'] is None for row in product['comp'])

    def test_preferred_product_uses_schedule_b(self, admin_client):
        carrier = CarrierFactory()

        response = admin_client.post(
            f'/api/carriers/{carrier.id}/products', {'name': 'Term Preferred Plus'}, format='json',
        )

        product = response.json()['carrier']['products'][0]
        assert product['schema'] == 'B'
        assert product['comp'][0]['comp_level'] == 125
        assert CarrierProductComp.objects.filter(product_id=response.json()['product_id']).count() == 11

    def test_invalid_schema(self, admin_client):
        carrier = CarrierFactory()

        response = admin_client.post(
            f'/api/carriers/{carrier.id}/products', {'name': 'X', 'schema': 'C'}, format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not CarrierProduct.objects.exists()

    def test_save_rate_upserts(self, admin_client):
        product = CarrierProductFactory()

        first = admin_client.put(
            f'/api/carriers/products/{product.id}/comp', {'comp_level': 100, 'rate': '95.5'}, format='json',
        )
        second = admin_client.put(
            f'/api/carriers/products/{product.id}/comp', {'comp_level': 100, 'rate': '97'}, format='json',
        )

        assert first.status_code == status.HTTP_200_OK
        assert second.json()['comp']['rate'] == 97.0
        rows = CarrierProductComp.objects.filter(product=product, comp_level=100)
        assert rows.count() == 1
        assert rows.first().rate == Decimal('97.00')

    def test_blank_rate_clears(self, admin_client):
        product = CarrierProductFactory()
        admin_client.put(f'/api/carriers/products/{product.id}/comp', {'comp_level': 90, 'rate': '80'}, format='json')

        response = admin_client.put(
            f'/api/carriers/products/{product.id}/comp', {'comp_level': 90, 'rate': ''}, format='json',
        )

        assert response.json()['comp']['rate'] is None

    def test_delete_product_removes_comp_rows(self, admin_client):
        carrier = CarrierFactory()
        created = admin_client.post(f'/api/carriers/{carrier.id}/products', {'name': 'Whole Life'}, format='json')
        product_id = created.json()['product_id']

        response = admin_client.delete(f'/api/carriers/products/{product_id}')

        assert response.status_code == status.HTTP_200_OK
        assert not CarrierProductComp.objects.filter(product_id=product_id).exists()

    def test_delete_missing_product(self, admin_client):
        response = admin_client.delete(f'/api/carriers/products/{uuid.uuid4()}')

        assert response.status_code == status.HTTP_404_NOT_FOUND
