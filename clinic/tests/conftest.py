from datetime import timedelta
from itertools import count

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from clinic.models import Role
from clinic.services.auth import register

_seq = count(1)


@pytest.fixture(autouse=True)
def _clear_throttle_counters():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_account(db):
    """Register an account through the service layer; returns AuthResult."""
    def _make(role=Role.PATIENT, email=None, **extra):
        n = next(_seq)
        data = {
            'first_name': 'Test',
            'last_name': f'User{n}',
            'email': email or f'{role}{n}@example.com',
            'password': 'secret123',
            'user_type': role,
        }
        if role == Role.DOCTOR:
            data.update(specialization='Cardiology', experience=5, license_number=f'LIC{n:04d}')
        data.update(extra)
        return register(data)
    return _make


@pytest.fixture
def client_for():
    def _client(result=None):
        client = APIClient()
        if result is not None:
            client.credentials(HTTP_AUTHORIZATION=f'Bearer {result.token}')
        return client
    return _client


@pytest.fixture
def patient(make_account):
    return make_account(Role.PATIENT)


@pytest.fixture
def other_patient(make_account):
    return make_account(Role.PATIENT)


@pytest.fixture
def doctor(make_account):
    return make_account(Role.DOCTOR, first_name='Arjun', last_name='Rao')


@pytest.fixture
def staff(make_account):
    return make_account(Role.STAFF)


@pytest.fixture
def tomorrow():
    return (timezone.localdate() + timedelta(days=1)).isoformat()
