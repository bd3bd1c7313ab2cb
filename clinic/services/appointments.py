"""
Appointment booking, updates, cancellation and CSV export.
"""
from __future__ import annotations

import csv
import io
import logging
from typing import Optional

from django.db import transaction
from django.db.models import Count, QuerySet
from django.utils import timezone

from clinic.exceptions import ForbiddenError, NotFoundError, ValidationError
from clinic.models import Appointment, Doctor, Patient, Role, User
from clinic.services import policy
from clinic.services.audit import log_action
from clinic.services.records import apply_changes, fetch

logger = logging.getLogger(__name__)

CSV_COLUMNS = ['id', 'patient', 'doctor', 'date', 'time', 'reason', 'status']


def base_queryset() -> QuerySet:
    return Appointment.objects.select_related('patient__user', 'doctor__user')


def scoped_queryset(principal: User, *, status: Optional[str] = None) -> QuerySet:
    """Appointments visible to ``principal``, newest appointment date first."""
    qs = base_queryset()
    if principal.user_type == Role.PATIENT:
        qs = qs.filter(patient__user=principal)
    elif principal.user_type == Role.DOCTOR:
        qs = qs.filter(doctor__user=principal)
    elif principal.user_type != Role.STAFF:
        return qs.none()
    if status:
        qs = qs.filter(status=status)
    return qs.order_by('-appointment_date', '-id')


def refresh_patient_count(doctor: Doctor) -> None:
    total = doctor.appointments.exclude(patient=None).aggregate(n=Count('patient', distinct=True))['n']
    Doctor.objects.filter(pk=doctor.pk).update(total_patients=total)


def _booking_patient(principal: User, patient_id: Optional[int]) -> Patient:
    if principal.user_type == Role.PATIENT:
        patient = Patient.objects.filter(user=principal).first()
        if patient is None:
            raise NotFoundError('Patient profile not found')
        return patient
    if principal.user_type == Role.STAFF:
        if not patient_id:
            raise ValidationError('patientId is required')
        return fetch(Patient.objects.select_related('user'), patient_id, 'Patient not found')
    raise ForbiddenError('Access denied. Insufficient permissions.')


def create_appointment(principal: User, data: dict) -> Appointment:
    """Book an appointment with an available doctor.

    A missing or unavailable doctor fails with 404 before anything is
    written.
    """
    patient = _booking_patient(principal, data.get('patient_id'))
    doctor = Doctor.objects.filter(pk=data['doctor_id'], is_available=True, user__is_active=True).first()
    if doctor is None:
        raise NotFoundError('Doctor not available')

    with transaction.atomic():
        appointment = Appointment(
            patient=patient,
            doctor=doctor,
            appointment_date=data['appointment_date'],
            appointment_time=data['appointment_time'],
            reason=data['reason'],
            notes=data.get('notes') or '',
        )
        appointment.full_clean()
        appointment.save()
        refresh_patient_count(doctor)
    logger.info('appointment %s booked: patient %s with doctor %s', appointment.id, patient.id, doctor.id)
    return base_queryset().get(pk=appointment.pk)


def authorize_update(principal: User, appointment: Appointment, raw: dict) -> None:
    """Role checks for an update, run before the body is validated.

    ``raw`` is the request body as sent; patients are held to a cancel-only
    body, judged on what they sent rather than on what validation kept.
    """
    policy.ensure_appointment_access(principal, appointment)
    if principal.user_type == Role.PATIENT:
        policy.ensure_patient_may_change(raw)


def update_appointment(appointment: Appointment, changes: dict) -> Appointment:
    if changes == {'status': Appointment.STATUS_CANCELLED} and appointment.status == Appointment.STATUS_CANCELLED:
        return appointment
    apply_changes(appointment, changes)
    return base_queryset().get(pk=appointment.pk)


def cancel(appointment: Appointment) -> Appointment:
    if appointment.status != Appointment.STATUS_CANCELLED:
        appointment.status = Appointment.STATUS_CANCELLED
        appointment.save(update_fields=['status', 'updated_at'])
    return appointment


def delete_appointment(principal: User, appointment: Appointment) -> Appointment:
    """Deleting an appointment cancels it; the row is kept as history."""
    policy.ensure_appointment_access(principal, appointment)
    cancel(appointment)
    logger.info('appointment %s cancelled by %s', appointment.id, principal.id)
    log_action(user=principal, action='cancel', object_type='appointment', object_id=appointment.id)
    return appointment


def _name(profile) -> str:
    return profile.user.get_full_name() if profile is not None else ''


def export_csv(queryset: QuerySet) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(CSV_COLUMNS)
    for a in queryset:
        writer.writerow([
            a.id,
            _name(a.patient),
            _name(a.doctor),
            timezone.localtime(a.appointment_date).date().isoformat(),
            a.appointment_time,
            a.reason,
            a.status,
        ])
    return buf.getvalue()
