import pytest
import requests
from django.core.management import call_command
from django.urls import reverse
from rest_framework.test import APIClient

from clinic.models import Doctor, User
from clinic.services import payments

pytestmark = pytest.mark.django_db


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} error')

    def json(self):
        return self.payload


@pytest.fixture
def gateway(settings, monkeypatch):
    settings.RAZORPAY_KEY_ID = 'rzp_test_key'
    settings.RAZORPAY_KEY_SECRET = 'rzp_test_secret'
    calls = []

    def fake_post(url, json=None, auth=None, timeout=None):
        calls.append({'url': url, 'json': json, 'auth': auth})
        return FakeResponse({'id': 'order_123', 'amount': json['amount'], 'currency': json['currency']})

    monkeypatch.setattr(payments.requests, 'post', fake_post)
    return calls


def create_order(body):
    return APIClient().post(reverse('create_payment_order'), body, format='json')


def test_order_amount_is_sent_in_paise(gateway):
    r = create_order({'amount': 499.5})
    assert r.status_code == 200
    assert r.data == {'success': True, 'data': {'orderId': 'order_123', 'amount': 49950, 'currency': 'INR'}}

    call = gateway[0]
    assert call['url'].endswith('/orders')
    assert call['auth'] == ('rzp_test_key', 'rzp_test_secret')
    assert call['json']['receipt'].startswith('rcpt_')


@pytest.mark.parametrize('amount', [0, -10, 'abc'])
def test_invalid_amount_is_rejected(gateway, amount):
    r = create_order({'amount': amount})
    assert r.status_code == 400
    assert gateway == []


def test_missing_gateway_keys_is_internal_error(settings):
    settings.RAZORPAY_KEY_ID = ''
    r = create_order({'amount': 100})
    assert r.status_code == 500
    assert r.data['success'] is False


def test_gateway_failure_is_internal_error(settings, monkeypatch):
    settings.RAZORPAY_KEY_ID = 'k'
    settings.RAZORPAY_KEY_SECRET = 's'

    def broken(*args, **kwargs):
        raise requests.ConnectionError('unreachable')

    monkeypatch.setattr(payments.requests, 'post', broken)
    r = create_order({'amount': 100})
    assert r.status_code == 500
    assert r.data == {'success': False, 'message': 'Failed to create payment order'}


def test_health_reports_database():
    r = APIClient().get(reverse('health'))
    assert r.status_code == 200
    body = r.json()
    assert body['success'] is True
    assert body['database'] == 'connected'
    assert body['timestamp']


def test_seed_command_is_idempotent():
    call_command('seed_doctors')
    call_command('seed_doctors')
    assert Doctor.objects.count() == 4
    assert User.objects.filter(email='admin@medicare.com', user_type='staff').count() == 1
    assert float(Doctor.objects.get(license_number='DOC001').consultation_fee) == 500
    assert User.objects.get(email='rohan@gmail.com').check_password('patient123')


def test_seed_command_puts_retired_demo_doctor_back_on_duty():
    call_command('seed_doctors')
    doctor = Doctor.objects.select_related('user').get(license_number='DOC001')
    User.objects.filter(pk=doctor.user_id).update(is_active=False)
    Doctor.objects.filter(pk=doctor.pk).update(is_available=False)

    call_command('seed_doctors')
    doctor.refresh_from_db()
    doctor.user.refresh_from_db()
    assert doctor.user.is_active is True
    assert doctor.is_available is True
