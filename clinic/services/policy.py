"""
Ownership rules shared by the resource views.

Role checks live in :mod:`clinic.permissions`; the functions here decide
whether an authenticated principal may touch one particular record.
"""
from __future__ import annotations

from typing import Optional

from clinic.exceptions import ForbiddenError
from clinic.models import Appointment, Feedback, Role, User

PATIENT_APPOINTMENT_FIELDS = {'status'}


def is_staff(user: User) -> bool:
    return getattr(user, 'user_type', None) == Role.STAFF


def owner_user_id(profile) -> Optional[int]:
    """User id behind a Patient/Doctor/Staff profile (``None`` if gone)."""
    return profile.user_id if profile is not None else None


def ensure_owner(principal: User, owner_id: Optional[int], message: str = 'Access denied') -> None:
    if owner_id is None or principal.id != owner_id:
        raise ForbiddenError(message)


def ensure_self_or_staff(principal: User, user_id: int) -> None:
    if not is_staff(principal):
        ensure_owner(principal, user_id)


def ensure_not_self(principal: User, user_id: Optional[int], message: str = 'You cannot delete your own account') -> None:
    if user_id is not None and principal.id == user_id:
        raise ForbiddenError(message)


def ensure_appointment_access(principal: User, appointment: Appointment) -> None:
    """Staff see everything; patients and doctors only their own bookings."""
    if is_staff(principal):
        return
    if principal.user_type == Role.PATIENT:
        ensure_owner(principal, owner_user_id(appointment.patient))
    elif principal.user_type == Role.DOCTOR:
        ensure_owner(principal, owner_user_id(appointment.doctor))
    else:
        raise ForbiddenError('Access denied')


def ensure_patient_may_change(changes, *, cancelled: str = Appointment.STATUS_CANCELLED) -> None:
    """Patients may only cancel: ``{"status": "Cancelled"}`` and nothing else."""
    if set(changes.keys()) - PATIENT_APPOINTMENT_FIELDS or changes.get('status') != cancelled:
        raise ForbiddenError('Patients can only cancel appointments')


def ensure_feedback_access(principal: User, feedback: Feedback) -> None:
    if is_staff(principal):
        return
    if principal.user_type != Role.PATIENT:
        raise ForbiddenError('Access denied')
    ensure_owner(principal, owner_user_id(feedback.patient))
