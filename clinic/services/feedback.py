"""
Patient feedback and the doctor rating aggregates it drives.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Avg, Count, QuerySet

from clinic.exceptions import ForbiddenError, NotFoundError
from clinic.models import Appointment, Doctor, Feedback, Patient, User
from clinic.services import policy
from clinic.services.audit import log_action
from clinic.services.records import apply_changes, fetch

logger = logging.getLogger(__name__)


def base_queryset() -> QuerySet:
    return Feedback.objects.select_related('patient__user', 'doctor__user', 'appointment').order_by('-created_at', '-id')


def refresh_doctor_rating(doctor: Optional[Doctor]) -> None:
    """Recompute ``rating`` (one decimal) and ``total_ratings`` from feedback."""
    if doctor is None:
        return
    agg = Feedback.objects.filter(doctor=doctor).aggregate(avg=Avg('rating'), n=Count('id'))
    Doctor.objects.filter(pk=doctor.pk).update(
        rating=round(agg['avg'] or 0, 1),
        total_ratings=agg['n'],
    )


def create_feedback(principal: User, data: dict) -> Feedback:
    patient = Patient.objects.filter(user=principal).first()
    if patient is None:
        raise NotFoundError('Patient profile not found')

    doctor = None
    if data.get('doctor_id'):
        doctor = fetch(Doctor.objects.all(), data['doctor_id'], 'Doctor not found')
    appointment = None
    if data.get('appointment_id'):
        appointment = fetch(Appointment.objects.all(), data['appointment_id'], 'Appointment not found')
        if appointment.patient_id != patient.id:
            raise ForbiddenError('You can only give feedback on your own appointments')
        doctor = doctor or appointment.doctor

    with transaction.atomic():
        feedback = Feedback(
            patient=patient,
            doctor=doctor,
            appointment=appointment,
            rating=data['rating'],
            comment=data.get('comment') or '',
            category=data.get('category') or 'General',
            is_anonymous=data.get('is_anonymous', False),
        )
        feedback.full_clean()
        feedback.save()
        refresh_doctor_rating(doctor)
    logger.info('feedback %s submitted by patient %s', feedback.id, patient.id)
    return base_queryset().get(pk=feedback.pk)


def update_feedback(principal: User, feedback: Feedback, changes: dict) -> Feedback:
    policy.ensure_feedback_access(principal, feedback)
    if 'status' in changes and not policy.is_staff(principal):
        raise ForbiddenError('Only staff can change the feedback status')
    with transaction.atomic():
        apply_changes(feedback, changes)
        refresh_doctor_rating(feedback.doctor)
    return base_queryset().get(pk=feedback.pk)


def delete_feedback(principal: User, feedback: Feedback) -> None:
    policy.ensure_feedback_access(principal, feedback)
    doctor = feedback.doctor
    feedback_id = feedback.id
    with transaction.atomic():
        feedback.delete()
        refresh_doctor_rating(doctor)
    log_action(user=principal, action='delete', object_type='feedback', object_id=feedback_id)
