# tests/test_pharmacies_api.py
import datetime

import pytest

from common.enums import RegistrationStatus
from pharmacies.models import Pharmacy
from tests.factories import PharmacyFactory, UserFactory


@pytest.mark.django_db
class TestPharmacyEndpoints:

    def test_member_registers_own_pharmacy(self, member_client, member):
        response = member_client.post('/api/pharmacies/', {
            'name': 'Good Health Pharmacy',
            'registration_number': 'PCN-99999',
            'location': 'Yaba',
            'ward_area': 'Ward C',
        }, format='json')

        assert response.status_code == 201
        assert Pharmacy.objects.get(registration_number='PCN-99999').owner == member

    def test_admin_sees_all_members_see_own(self, admin_client, member_client, pharmacy):
        PharmacyFactory()

        assert admin_client.get('/api/pharmacies/').data['count'] == 2
        member_results = member_client.get('/api/pharmacies/').data['results']
        assert [p['id'] for p in member_results] == [pharmacy.pk]

    def test_filters(self, admin_client):
        PharmacyFactory(ward_area='Ward B', registration_date=datetime.date(2022, 4, 1))
        PharmacyFactory(ward_area='Ward B', registration_date=datetime.date(2019, 4, 1))
        PharmacyFactory(registration_status=RegistrationStatus.SUSPENDED)

        by_year = admin_client.get('/api/pharmacies/', {'ward_area': 'ward b', 'registration_year': 2022})
        by_status = admin_client.get('/api/pharmacies/', {'registration_status': 'suspended'})

        assert by_year.data['count'] == 1
        assert by_status.data['count'] == 1

    def test_member_cannot_change_registration_status(self, member_client, pharmacy):
        response = member_client.patch(
            f'/api/pharmacies/{pharmacy.pk}/', {'registration_status': 'suspended', 'location': 'Lekki'},
            format='json',
        )
        assert response.status_code == 200
        pharmacy.refresh_from_db()
        assert pharmacy.registration_status == RegistrationStatus.ACTIVE
        assert pharmacy.location == 'Lekki'

    def test_admin_assigns_owner(self, admin_client):
        owner = UserFactory()
        response = admin_client.post('/api/pharmacies/', {
            'name': 'Central', 'registration_number': 'PCN-12345', 'owner_id': owner.pk,
        }, format='json')
        assert response.status_code == 201
        assert response.data['owner']['id'] == owner.pk

    def test_delete_is_soft(self, admin_client, pharmacy):
        response = admin_client.delete(f'/api/pharmacies/{pharmacy.pk}/')
        assert response.status_code == 204
        pharmacy.refresh_from_db()
        assert pharmacy.is_deleted is True

    def test_anonymous_is_rejected(self, api_client):
        assert api_client.get('/api/pharmacies/').status_code == 401


@pytest.mark.django_db
class TestCurrentUser:

    def test_me(self, member_client, member):
        response = member_client.get('/api/auth/me/')
        assert response.status_code == 200
        assert response.data['username'] == member.username

    def test_token_obtain(self, api_client):
        user = UserFactory()
        response = api_client.post('/api/auth/token/', {
            'username': user.username, 'password': 'testpass123',
        }, format='json')
        assert response.status_code == 200
        assert 'access' in response.data
