"""
Account and profile management: users, doctors, patients and staff.
"""
import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from clinic.models import Appointment, AuditEvent, Doctor, Patient, Role, User

pytestmark = pytest.mark.django_db


class TestUsers:
    def test_staff_lists_users_without_passwords(self, staff, patient, doctor, client_for):
        r = client_for(staff).get(reverse('users'))
        assert r.status_code == 200
        assert r.data['count'] == 3
        assert all('password' not in u for u in r.data['data'])

    def test_non_staff_cannot_list_users(self, patient, doctor, client_for):
        assert client_for(patient).get(reverse('users')).status_code == 403
        assert client_for(doctor).get(reverse('users')).status_code == 403

    def test_staff_creates_account_without_token(self, staff, client_for):
        r = client_for(staff).post(reverse('users'), {
            'firstName': 'Walk', 'lastName': 'In', 'email': 'walkin@example.com', 'password': 'pw',
        }, format='json')
        assert r.status_code == 201
        assert 'token' not in r.data
        assert Patient.objects.filter(user__email='walkin@example.com').exists()

    def test_user_reads_self_but_not_others(self, patient, other_patient, client_for):
        client = client_for(patient)
        assert client.get(reverse('user_detail', args=[patient.user.id])).status_code == 200
        assert client.get(reverse('user_detail', args=[other_patient.user.id])).status_code == 403

    def test_self_update_cannot_touch_privileged_fields(self, patient, client_for):
        client = client_for(patient)
        url = reverse('user_detail', args=[patient.user.id])
        r = client.put(url, {'phone': '5550001', 'firstName': 'Ravi'}, format='json')
        assert r.status_code == 200
        assert r.data['data']['phone'] == '5550001'

        assert client.put(url, {'userType': 'staff'}, format='json').status_code == 403
        assert client.put(url, {'email': 'new@example.com'}, format='json').status_code == 403
        assert User.objects.get(pk=patient.user.pk).user_type == Role.PATIENT

    def test_password_is_not_changed_through_update(self, patient, client_for):
        url = reverse('user_detail', args=[patient.user.id])
        client_for(patient).put(url, {'password': 'hijack'}, format='json')
        assert User.objects.get(pk=patient.user.pk).check_password('secret123')

    def test_staff_email_change_to_taken_address_conflicts(self, staff, patient, other_patient, client_for):
        r = client_for(staff).put(reverse('user_detail', args=[patient.user.id]),
                                  {'email': other_patient.user.email}, format='json')
        assert r.status_code == 409

    def test_delete_is_soft_and_blocks_login(self, staff, patient, client_for):
        r = client_for(staff).delete(reverse('user_detail', args=[patient.user.id]))
        assert r.status_code == 200
        user = User.objects.get(pk=patient.user.pk)
        assert user.is_active is False
        assert AuditEvent.objects.filter(action='deactivate', object_id=user.id).exists()

        r = APIClient().post(reverse('login_view'), {'email': user.email, 'password': 'secret123'}, format='json')
        assert r.status_code == 401

    def test_staff_cannot_deactivate_self_through_update(self, staff, client_for):
        r = client_for(staff).put(reverse('user_detail', args=[staff.user.id]), {'isActive': False}, format='json')
        assert r.status_code == 403
        assert User.objects.get(pk=staff.user.pk).is_active is True

    def test_deactivating_doctor_through_update_stops_bookings(self, staff, doctor, patient, tomorrow, client_for):
        r = client_for(staff).put(reverse('user_detail', args=[doctor.user.id]), {'isActive': False}, format='json')
        assert r.status_code == 200
        assert r.data['data']['isActive'] is False
        assert Doctor.objects.get(pk=doctor.profile.pk).is_available is False
        assert AuditEvent.objects.filter(action='deactivate', object_id=doctor.user.id).exists()

        r = client_for(patient).post(reverse('appointments'), {
            'doctorId': doctor.profile.id, 'appointmentDate': tomorrow, 'appointmentTime': '10:00',
            'reason': 'Checkup',
        }, format='json')
        assert r.status_code == 404

    def test_user_type_is_fixed_once_a_profile_exists(self, staff, patient, client_for):
        r = client_for(staff).put(reverse('user_detail', args=[patient.user.id]), {'userType': 'doctor'}, format='json')
        assert r.status_code == 409
        assert User.objects.get(pk=patient.user.pk).user_type == Role.PATIENT
        assert not Doctor.objects.filter(user=patient.user).exists()

        r = client_for(staff).put(reverse('user_detail', args=[patient.user.id]), {'userType': 'patient'}, format='json')
        assert r.status_code == 200

    def test_staff_cannot_delete_self(self, staff, client_for):
        r = client_for(staff).delete(reverse('user_detail', args=[staff.user.id]))
        assert r.status_code == 403
        assert User.objects.get(pk=staff.user.pk).is_active is True

    def test_non_staff_cannot_delete(self, patient, other_patient, client_for):
        r = client_for(patient).delete(reverse('user_detail', args=[other_patient.user.id]))
        assert r.status_code == 403


class TestDashboard:
    def test_patient_dashboard(self, patient, doctor, tomorrow, client_for):
        client = client_for(patient)
        client.post(reverse('appointments'), {
            'doctorId': doctor.profile.id, 'appointmentDate': tomorrow, 'appointmentTime': '09:30',
            'reason': 'Follow up',
        }, format='json')
        r = client.get(reverse('user_dashboard', args=[patient.user.id]))
        assert r.status_code == 200
        data = r.data['data']
        assert data['stats'] == {'totalAppointments': 1, 'upcomingAppointments': 1, 'completedAppointments': 0}
        assert data['profile']['id'] == patient.profile.id
        assert data['user']['id'] == patient.user.id

    def test_staff_dashboard_and_access(self, staff, patient, client_for):
        r = client_for(staff).get(reverse('user_dashboard', args=[staff.user.id]))
        assert r.data['data']['stats']['totalUsers'] == 2
        assert client_for(staff).get(reverse('user_dashboard', args=[patient.user.id])).status_code == 200
        assert client_for(patient).get(reverse('user_dashboard', args=[staff.user.id])).status_code == 403


class TestDoctors:
    def test_public_listing_with_filters(self, doctor, make_account):
        away = make_account(Role.DOCTOR, specialization='Neurology')
        Doctor.objects.filter(pk=away.profile.pk).update(is_available=False)
        client = APIClient()

        assert client.get(reverse('doctors')).data['count'] == 2
        r = client.get(reverse('doctors'), {'available': 'true'})
        assert [d['id'] for d in r.data['data']] == [doctor.profile.id]
        r = client.get(reverse('doctors'), {'specialization': 'neuro'})
        assert [d['id'] for d in r.data['data']] == [away.profile.id]
        assert client.get(reverse('doctors'), {'available': 'maybe'}).status_code == 400

    def test_public_detail_and_by_user(self, doctor):
        client = APIClient()
        r = client.get(reverse('doctor_detail', args=[doctor.profile.id]))
        assert r.status_code == 200
        assert r.data['data']['userId']['email'] == doctor.user.email
        r = client.get(reverse('doctor_by_user', args=[doctor.user.id]))
        assert r.data['data']['id'] == doctor.profile.id
        assert client.get(reverse('doctor_detail', args=[999999])).status_code == 404

    def test_doctor_updates_own_profile_only(self, doctor, make_account, client_for):
        url = reverse('doctor_detail', args=[doctor.profile.id])
        r = client_for(doctor).put(url, {'consultationFee': 450, 'isAvailable': False}, format='json')
        assert r.status_code == 200
        assert r.data['data']['consultationFee'] == 450.0
        assert r.data['data']['isAvailable'] is False

        other = make_account(Role.DOCTOR)
        assert client_for(other).put(url, {'consultationFee': 1}, format='json').status_code == 403
        assert APIClient().put(url, {'consultationFee': 1}, format='json').status_code == 401

    def test_update_revalidates(self, doctor, client_for):
        url = reverse('doctor_detail', args=[doctor.profile.id])
        r = client_for(doctor).put(url, {'experience': -1}, format='json')
        assert r.status_code == 400

    def test_duplicate_license_conflicts(self, doctor, make_account, staff, client_for):
        other = make_account(Role.DOCTOR)
        r = client_for(staff).put(reverse('doctor_detail', args=[other.profile.id]),
                                  {'licenseNumber': doctor.profile.license_number}, format='json')
        assert r.status_code == 409

    def test_my_profile(self, doctor, patient, client_for):
        r = client_for(doctor).get(reverse('my_doctor_profile'))
        assert r.data['data']['id'] == doctor.profile.id
        assert client_for(patient).get(reverse('my_doctor_profile')).status_code == 403

    def test_delete_retires_doctor_and_keeps_history(self, staff, doctor, patient, tomorrow, client_for):
        client_for(patient).post(reverse('appointments'), {
            'doctorId': doctor.profile.id, 'appointmentDate': tomorrow, 'appointmentTime': '10:00',
            'reason': 'Checkup',
        }, format='json')
        r = client_for(staff).delete(reverse('doctor_detail', args=[doctor.profile.id]))
        assert r.status_code == 200

        d = Doctor.objects.select_related('user').get(pk=doctor.profile.pk)
        assert d.user.is_active is False
        assert d.is_available is False
        assert Appointment.objects.get().doctor_id == d.id
        assert APIClient().get(reverse('doctors')).data['count'] == 0

    def test_deactivated_doctor_cannot_be_made_available(self, staff, doctor, client_for):
        client = client_for(staff)
        client.delete(reverse('doctor_detail', args=[doctor.profile.id]))
        r = client.put(reverse('doctor_detail', args=[doctor.profile.id]), {'isAvailable': True}, format='json')
        assert r.status_code == 409
        assert Doctor.objects.get(pk=doctor.profile.pk).is_available is False

    def test_doctor_cannot_delete_profiles(self, doctor, client_for):
        r = client_for(doctor).delete(reverse('doctor_detail', args=[doctor.profile.id]))
        assert r.status_code == 403


class TestPatientsAndStaff:
    def test_patient_listing_is_for_staff_and_doctors(self, patient, doctor, staff, client_for):
        assert client_for(patient).get(reverse('patients')).status_code == 403
        r = client_for(doctor).get(reverse('patients'))
        assert r.status_code == 200
        assert r.data['count'] == 1
        assert 'medicalHistory' not in r.data['data'][0]

    def test_patient_updates_own_profile(self, patient, other_patient, client_for):
        url = reverse('patient_detail', args=[patient.profile.id])
        r = client_for(patient).put(url, {
            'bloodGroup': 'O+',
            'address': {'city': 'Pune'},
            'medicalHistory': [{'condition': 'Asthma', 'diagnosedDate': '2015-06-01', 'status': 'Managed'}],
        }, format='json')
        assert r.status_code == 200
        p = Patient.objects.get(pk=patient.profile.pk)
        assert p.blood_group == 'O+'
        assert p.address == {'street': '', 'city': 'Pune', 'state': '', 'zipCode': ''}
        assert p.medical_history == [{'condition': 'Asthma', 'diagnosedDate': '2015-06-01', 'status': 'Managed'}]

        assert client_for(other_patient).get(url).status_code == 403
        assert client_for(other_patient).put(url, {'bloodGroup': 'A+'}, format='json').status_code == 403

    def test_patient_by_user_and_profile_me(self, patient, other_patient, staff, client_for):
        assert client_for(patient).get(reverse('my_patient_profile')).data['data']['id'] == patient.profile.id
        url = reverse('patient_by_user', args=[patient.user.id])
        assert client_for(staff).get(url).status_code == 200
        assert client_for(other_patient).get(url).status_code == 403

    def test_staff_endpoints(self, staff, make_account, patient, client_for):
        colleague = make_account(Role.STAFF, department='Billing', position='Clerk')
        client = client_for(staff)
        r = client.get(reverse('staff_list'))
        assert r.data['count'] == 2
        assert 'salary' not in r.data['data'][0]

        url = reverse('staff_detail', args=[colleague.profile.id])
        r = client.put(url, {'shift': 'Night', 'salary': '25000.00'}, format='json')
        assert r.status_code == 200
        assert r.data['data']['shift'] == 'Night'
        assert r.data['data']['salary'] == 25000.0

        assert client.delete(reverse('staff_detail', args=[staff.profile.id])).status_code == 403
        assert client.delete(url).status_code == 200
        assert User.objects.get(pk=colleague.user.pk).is_active is False
        assert client_for(patient).get(reverse('staff_list')).status_code == 403
