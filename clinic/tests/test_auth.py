from datetime import timedelta

import pytest
from django.urls import reverse
from rest_framework.settings import api_settings
from rest_framework.test import APIClient
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import AccessToken

from clinic.authentication import BearerTokenAuthentication
from clinic.handlers import api_exception_handler
from clinic.models import AuditEvent, Doctor, Patient, Role, Staff, User

pytestmark = pytest.mark.django_db


def test_register_patient_creates_user_profile_and_token():
    client = APIClient()
    r = client.post(reverse('register_view'), {
        'firstName': 'Rohan', 'lastName': 'Sharma', 'email': 'Rohan@Example.com',
        'password': 'patient123', 'phone': '9876543210', 'gender': 'Male',
    }, format='json')
    assert r.status_code == 201
    assert r.data['success'] is True
    assert r.data['token']
    assert r.data['user']['email'] == 'rohan@example.com'
    assert r.data['user']['userType'] == 'patient'
    assert 'password' not in r.data['user']
    user = User.objects.get(email='rohan@example.com')
    assert Patient.objects.filter(user=user, gender='Male').exists()
    assert AuditEvent.objects.filter(action='register', object_id=user.id).exists()


def test_register_doctor_scenario_then_duplicate_conflicts():
    client = APIClient()
    payload = {
        'firstName': 'Arjun', 'lastName': 'Rao', 'email': 'a@h.com', 'password': 'x',
        'userType': 'doctor', 'specialization': 'Cardiology', 'experience': 10, 'licenseNumber': 'DOC1',
    }
    r = client.post(reverse('register_view'), payload, format='json')
    assert r.status_code == 201
    assert r.data['token']
    doctor = Doctor.objects.select_related('user').get(user__email='a@h.com')
    assert doctor.license_number == 'DOC1'
    assert doctor.department == 'Cardiology'
    assert doctor.qualification == 'MD'
    assert float(doctor.consultation_fee) == 100
    assert doctor.is_available is True

    r = client.post(reverse('register_view'), payload, format='json')
    assert r.status_code == 409
    assert r.data == {'success': False, 'message': 'User already exists with this email'}
    assert User.objects.filter(email='a@h.com').count() == 1


@pytest.mark.parametrize('email', ['taken@example.com', 'TAKEN@example.com', '  Taken@Example.COM '])
def test_duplicate_email_conflicts_regardless_of_case(make_account, email):
    make_account(Role.PATIENT, email='taken@example.com')
    r = APIClient().post(reverse('register_view'), {
        'firstName': 'Other', 'lastName': 'Person', 'email': email, 'password': 'different',
        'userType': 'staff',
    }, format='json')
    assert r.status_code == 409
    assert r.data['success'] is False


def test_register_requires_core_fields():
    r = APIClient().post(reverse('register_view'), {'email': 'x@example.com'}, format='json')
    assert r.status_code == 400
    assert r.data['message'] == 'First name, last name, email, and password are required'


def test_register_doctor_requires_license():
    r = APIClient().post(reverse('register_view'), {
        'firstName': 'A', 'lastName': 'B', 'email': 'doc@example.com', 'password': 'pw',
        'userType': 'doctor', 'specialization': 'Neurology', 'experience': 3,
    }, format='json')
    assert r.status_code == 400
    assert not User.objects.filter(email='doc@example.com').exists()


def test_register_doctor_with_zero_experience_is_accepted():
    r = APIClient().post(reverse('register_view'), {
        'firstName': 'New', 'lastName': 'Grad', 'email': 'grad@example.com', 'password': 'pw',
        'userType': 'doctor', 'specialization': 'Pediatrics', 'experience': 0, 'licenseNumber': 'DOC9',
    }, format='json')
    assert r.status_code == 201
    assert Doctor.objects.get(license_number='DOC9').experience == 0


def test_register_staff_gets_generated_employee_id():
    r = APIClient().post(reverse('register_view'), {
        'firstName': 'Front', 'lastName': 'Desk', 'email': 'desk@example.com', 'password': 'pw',
        'userType': 'staff',
    }, format='json')
    assert r.status_code == 201
    staff = Staff.objects.get(user__email='desk@example.com')
    assert staff.employee_id.startswith('EMP')
    assert r.data['profile']['employeeId'] == staff.employee_id


def test_login_token_carries_identity_claims_and_expires_within_a_day(make_account):
    acct = make_account(Role.DOCTOR, email='doc@example.com', password='pw12345')
    r = APIClient().post(reverse('login_view'), {'email': 'DOC@example.com', 'password': 'pw12345'}, format='json')
    assert r.status_code == 200
    assert r.data['profile']['licenseNumber'] == acct.profile.license_number

    token = AccessToken(r.data['token'])
    assert token['userId'] == acct.user.id
    assert token['email'] == 'doc@example.com'
    assert token['userType'] == 'doctor'
    assert token['exp'] - token['iat'] <= timedelta(hours=24).total_seconds()


def test_login_failures_are_indistinguishable(make_account):
    make_account(Role.PATIENT, email='p@example.com', password='right')
    inactive = make_account(Role.PATIENT, email='gone@example.com', password='right')
    User.objects.filter(pk=inactive.user.pk).update(is_active=False)

    client = APIClient()
    attempts = [
        {'email': 'p@example.com', 'password': 'wrong'},
        {'email': 'nobody@example.com', 'password': 'right'},
        {'email': 'gone@example.com', 'password': 'right'},
    ]
    for body in attempts:
        r = client.post(reverse('login_view'), body, format='json')
        assert r.status_code == 401
        assert r.data == {'success': False, 'message': 'Invalid email or password'}
    assert AuditEvent.objects.filter(action='login', user=None).count() == 3
    assert AuditEvent.objects.filter(action='login', user=None).first().detail['ip'] == '127.0.0.1'


def test_login_requires_email_and_password():
    r = APIClient().post(reverse('login_view'), {'email': 'a@example.com'}, format='json')
    assert r.status_code == 400


def test_me_returns_principal_and_profile(patient, client_for):
    r = client_for(patient).get(reverse('me_view'))
    assert r.status_code == 200
    assert r.data['data']['user']['id'] == patient.user.id
    assert r.data['data']['profile']['id'] == patient.profile.id


def test_unauthenticated_appointment_list_is_401():
    r = APIClient().get(reverse('appointments'))
    assert r.status_code == 401
    assert r.data['success'] is False
    assert r['WWW-Authenticate'].startswith('Bearer')


def test_garbage_token_is_401():
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
    r = client.get(reverse('appointments'))
    assert r.status_code == 401
    assert r.data['message'] == 'Invalid or expired token'


def test_token_of_deactivated_user_is_rejected(patient, client_for):
    User.objects.filter(pk=patient.user.pk).update(is_active=False)
    r = client_for(patient).get(reverse('me_view'))
    assert r.status_code == 401


def test_unknown_api_route_returns_json_envelope():
    r = APIClient().get('/api/does-not-exist')
    assert r.status_code == 404
    assert r.json()['success'] is False


def test_drf_uses_the_envelope_exception_handler():
    assert api_settings.EXCEPTION_HANDLER is api_exception_handler
    assert APIView.authentication_classes == [BearerTokenAuthentication]


def test_login_with_stale_token_still_answers_401_on_bad_password(make_account):
    acct = make_account(Role.PATIENT, email='s@example.com', password='right')
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {acct.token}')
    r = client.post(reverse('login_view'), {'email': 's@example.com', 'password': 'wrong'}, format='json')
    assert r.status_code == 401
    assert r.data['message'] == 'Invalid email or password'
