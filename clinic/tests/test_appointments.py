from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from clinic.models import Appointment, Doctor, Role

pytestmark = pytest.mark.django_db


def book(client, doctor, date, **extra):
    body = {'doctorId': doctor.profile.id, 'appointmentDate': date, 'appointmentTime': '10:00 AM',
            'reason': 'Chest pain'}
    body.update(extra)
    return client.post(reverse('appointments'), body, format='json')


@pytest.fixture
def appointment(patient, doctor, tomorrow, client_for):
    r = book(client_for(patient), doctor, tomorrow)
    assert r.status_code == 201
    return Appointment.objects.get(pk=r.data['data']['id'])


def test_patient_books_with_available_doctor(patient, doctor, tomorrow, client_for):
    r = book(client_for(patient), doctor, tomorrow)
    assert r.status_code == 201
    data = r.data['data']
    assert data['status'] == 'Scheduled'
    assert data['patientId']['userId']['email'] == patient.user.email
    assert data['doctorId']['userId']['firstName'] == 'Arjun'
    assert Doctor.objects.get(pk=doctor.profile.pk).total_patients == 1


def test_booking_unavailable_doctor_is_404_and_persists_nothing(patient, doctor, tomorrow, client_for):
    Doctor.objects.filter(pk=doctor.profile.pk).update(is_available=False)
    r = book(client_for(patient), doctor, tomorrow)
    assert r.status_code == 404
    assert r.data == {'success': False, 'message': 'Doctor not available'}
    assert Appointment.objects.count() == 0


def test_booking_missing_doctor_is_404(patient, tomorrow, client_for):
    r = client_for(patient).post(reverse('appointments'), {
        'doctorId': 999999, 'appointmentDate': tomorrow, 'appointmentTime': '10:00', 'reason': 'x',
    }, format='json')
    assert r.status_code == 404
    assert Appointment.objects.count() == 0


def test_doctor_cannot_book(doctor, tomorrow, client_for):
    r = book(client_for(doctor), doctor, tomorrow)
    assert r.status_code == 403


def test_staff_books_for_patient(staff, patient, doctor, tomorrow, client_for):
    r = book(client_for(staff), doctor, tomorrow, patientId=patient.profile.id)
    assert r.status_code == 201
    assert r.data['data']['patientId']['id'] == patient.profile.id

    r = book(client_for(staff), doctor, tomorrow)
    assert r.status_code == 400


def test_booking_requires_reason(patient, doctor, tomorrow, client_for):
    r = client_for(patient).post(reverse('appointments'), {
        'doctorId': doctor.profile.id, 'appointmentDate': tomorrow, 'appointmentTime': '10:00',
    }, format='json')
    assert r.status_code == 400
    assert r.data['success'] is False


@pytest.mark.parametrize('body', [
    {'reason': 'Changed my mind'},
    {'status': 'Completed'},
    {'status': 'Confirmed'},
    {'status': 'Cancelled', 'notes': 'please'},
    {'appointmentDate': '2031-01-01'},
    {'status': 'Bogus'},
])
def test_patient_update_other_than_cancel_is_forbidden(appointment, patient, client_for, body):
    before = Appointment.objects.get(pk=appointment.pk)
    r = client_for(patient).put(reverse('appointment_detail', args=[appointment.pk]), body, format='json')
    assert r.status_code == 403
    after = Appointment.objects.get(pk=appointment.pk)
    assert (after.status, after.reason, after.notes, after.appointment_date, after.updated_at) == \
        (before.status, before.reason, before.notes, before.appointment_date, before.updated_at)


def test_patient_cancel_is_idempotent(appointment, patient, client_for):
    client = client_for(patient)
    url = reverse('appointment_detail', args=[appointment.pk])
    r1 = client.put(url, {'status': 'Cancelled'}, format='json')
    assert r1.status_code == 200
    assert r1.data['data']['status'] == 'Cancelled'
    r2 = client.put(url, {'status': 'Cancelled'}, format='json')
    assert r2.status_code == 200
    assert r2.data['data']['status'] == 'Cancelled'
    assert r2.data['data']['updatedAt'] == r1.data['data']['updatedAt']


def test_other_patient_cannot_see_or_cancel(appointment, other_patient, client_for):
    client = client_for(other_patient)
    url = reverse('appointment_detail', args=[appointment.pk])
    assert client.get(url).status_code == 403
    assert client.put(url, {'status': 'Cancelled'}, format='json').status_code == 403
    assert Appointment.objects.get(pk=appointment.pk).status == 'Scheduled'


def test_doctor_updates_status_and_prescription(appointment, doctor, client_for):
    r = client_for(doctor).put(reverse('appointment_detail', args=[appointment.pk]), {
        'status': 'Completed',
        'prescription': {'medicines': [{'name': 'Aspirin', 'dosage': '75mg', 'duration': '30 days'}],
                         'instructions': 'After food'},
    }, format='json')
    assert r.status_code == 200
    appointment.refresh_from_db()
    assert appointment.status == 'Completed'
    assert appointment.prescription['medicines'][0]['name'] == 'Aspirin'


def test_other_doctor_cannot_update(appointment, make_account, client_for):
    stranger = make_account(Role.DOCTOR)
    r = client_for(stranger).put(reverse('appointment_detail', args=[appointment.pk]),
                                 {'status': 'Completed'}, format='json')
    assert r.status_code == 403


def test_list_is_scoped_by_role(appointment, patient, other_patient, doctor, staff, client_for, make_account):
    url = reverse('appointments')
    assert client_for(patient).get(url).data['count'] == 1
    assert client_for(other_patient).get(url).data['count'] == 0
    assert client_for(doctor).get(url).data['count'] == 1
    assert client_for(make_account(Role.DOCTOR)).get(url).data['count'] == 0
    assert client_for(staff).get(url).data['count'] == 1


def test_list_filters_by_status_and_sorts_newest_first(patient, doctor, client_for):
    client = client_for(patient)
    today = timezone.localdate()
    for days in (1, 3, 2):
        assert book(client, doctor, (today + timedelta(days=days)).isoformat()).status_code == 201
    first = Appointment.objects.order_by('appointment_date').first()
    first.status = 'Cancelled'
    first.save()

    r = client.get(reverse('appointments'))
    dates = [a['appointmentDate'] for a in r.data['data']]
    assert dates == sorted(dates, reverse=True)

    r = client.get(reverse('appointments'), {'status': 'Cancelled'})
    assert r.data['count'] == 1
    assert r.data['data'][0]['id'] == first.id


def test_delete_cancels_and_keeps_history(appointment, staff, client_for):
    r = client_for(staff).delete(reverse('appointment_detail', args=[appointment.pk]))
    assert r.status_code == 200
    appointment.refresh_from_db()
    assert appointment.status == 'Cancelled'


def test_patient_delete_cancels_own(appointment, patient, client_for):
    r = client_for(patient).delete(reverse('appointment_detail', args=[appointment.pk]))
    assert r.status_code == 200
    assert Appointment.objects.get(pk=appointment.pk).status == 'Cancelled'


def test_staff_exports_csv(appointment, staff, patient, client_for):
    r = client_for(staff).get(reverse('export_appointments'))
    assert r.status_code == 200
    assert r['Content-Type'].startswith('text/csv')
    lines = r.content.decode().strip().splitlines()
    assert lines[0] == 'id,patient,doctor,date,time,reason,status'
    assert lines[1].startswith(f'{appointment.pk},{patient.user.get_full_name()},Arjun Rao,')


def test_export_is_staff_only(appointment, patient, client_for):
    assert client_for(patient).get(reverse('export_appointments')).status_code == 403


def test_patient_and_doctor_appointment_listings(appointment, patient, doctor, other_patient, client_for):
    r = client_for(patient).get(reverse('patient_appointments', args=[patient.profile.id]))
    assert r.status_code == 200 and r.data['count'] == 1
    r = client_for(other_patient).get(reverse('patient_appointments', args=[patient.profile.id]))
    assert r.status_code == 403
    r = client_for(doctor).get(reverse('doctor_appointments', args=[doctor.profile.id]))
    assert r.status_code == 200 and r.data['count'] == 1
