"""
JSON representations of the clinic models.

Reference fields are populated: ``userId``, ``patientId``, ``doctorId``
and ``appointmentId`` carry the referenced record's current data (or
``None`` once the record is gone) instead of a bare key.  Passwords are
never part of any representation.
"""
from __future__ import annotations

from typing import Optional

from clinic.models import Appointment, Doctor, Feedback, Patient, Staff, User


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def _money(value) -> Optional[float]:
    return float(value) if value is not None else None


def user_summary(user: Optional[User]) -> Optional[dict]:
    """The populated form used inside profiles (name and contact only)."""
    if user is None:
        return None
    return {
        'id': user.id,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'email': user.email,
        'phone': user.phone,
    }


def user_data(user: User) -> dict:
    return {
        'id': user.id,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'email': user.email,
        'userType': user.user_type,
        'phone': user.phone,
        'specialization': user.specialization,
        'experience': user.experience,
        'licenseNumber': user.license_number,
        'isActive': user.is_active,
        'createdAt': _iso(user.created_at),
    }


def patient_data(patient: Optional[Patient], *, with_history: bool = True) -> Optional[dict]:
    if patient is None:
        return None
    data = {
        'id': patient.id,
        'userId': user_summary(patient.user),
        'dateOfBirth': _iso(patient.date_of_birth),
        'gender': patient.gender,
        'bloodGroup': patient.blood_group,
        'address': patient.address,
        'emergencyContact': patient.emergency_contact,
        'createdAt': _iso(patient.created_at),
        'updatedAt': _iso(patient.updated_at),
    }
    if with_history:
        data['medicalHistory'] = patient.medical_history
    return data


def doctor_data(doctor: Optional[Doctor]) -> Optional[dict]:
    if doctor is None:
        return None
    return {
        'id': doctor.id,
        'userId': user_summary(doctor.user),
        'specialization': doctor.specialization,
        'qualification': doctor.qualification,
        'licenseNumber': doctor.license_number,
        'experience': doctor.experience,
        'department': doctor.department,
        'consultationFee': _money(doctor.consultation_fee),
        'isAvailable': doctor.is_available,
        'rating': doctor.rating,
        'totalRatings': doctor.total_ratings,
        'totalPatients': doctor.total_patients,
        'shiftTiming': doctor.shift_timing,
        'createdAt': _iso(doctor.created_at),
        'updatedAt': _iso(doctor.updated_at),
    }


def staff_data(staff: Optional[Staff], *, with_salary: bool = True) -> Optional[dict]:
    if staff is None:
        return None
    data = {
        'id': staff.id,
        'userId': user_summary(staff.user),
        'department': staff.department,
        'position': staff.position,
        'employeeId': staff.employee_id,
        'shift': staff.shift,
        'joiningDate': _iso(staff.joining_date),
        'createdAt': _iso(staff.created_at),
        'updatedAt': _iso(staff.updated_at),
    }
    if with_salary:
        data['salary'] = _money(staff.salary)
    return data


def profile_data(profile) -> Optional[dict]:
    """Representation of whichever role profile ``profile`` is."""
    if isinstance(profile, Patient):
        return patient_data(profile)
    if isinstance(profile, Doctor):
        return doctor_data(profile)
    if isinstance(profile, Staff):
        return staff_data(profile)
    return None


def appointment_data(appointment: Appointment, *, populate: bool = True) -> dict:
    if populate:
        patient = patient_data(appointment.patient, with_history=False)
        doctor = doctor_data(appointment.doctor)
    else:
        patient = appointment.patient_id
        doctor = appointment.doctor_id
    return {
        'id': appointment.id,
        'patientId': patient,
        'doctorId': doctor,
        'appointmentDate': _iso(appointment.appointment_date),
        'appointmentTime': appointment.appointment_time,
        'reason': appointment.reason,
        'status': appointment.status,
        'notes': appointment.notes,
        'prescription': appointment.prescription,
        'createdAt': _iso(appointment.created_at),
        'updatedAt': _iso(appointment.updated_at),
    }


def feedback_data(feedback: Feedback, *, reveal_patient: bool = True) -> dict:
    hide = feedback.is_anonymous and not reveal_patient
    return {
        'id': feedback.id,
        'patientId': None if hide else patient_data(feedback.patient, with_history=False),
        'doctorId': doctor_data(feedback.doctor),
        'appointmentId': appointment_data(feedback.appointment, populate=False) if feedback.appointment else None,
        'rating': feedback.rating,
        'comment': feedback.comment,
        'category': feedback.category,
        'isAnonymous': feedback.is_anonymous,
        'status': feedback.status,
        'createdAt': _iso(feedback.created_at),
        'updatedAt': _iso(feedback.updated_at),
    }
