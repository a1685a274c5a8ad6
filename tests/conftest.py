import pytest
from rest_framework.test import APIClient

from tests.factories import AdminFactory, PharmacyFactory, SecretaryFactory, UserFactory


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db):
    """
    Automatically enable database access for all tests.
    This fixture runs for every test function.
    """
    pass


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user():
    return AdminFactory()


@pytest.fixture
def member():
    return UserFactory()


@pytest.fixture
def pharmacy(member):
    return PharmacyFactory(owner=member)


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def member_client(member):
    client = APIClient()
    client.force_authenticate(user=member)
    return client


@pytest.fixture
def secretary_client():
    client = APIClient()
    client.force_authenticate(user=SecretaryFactory())
    return client
