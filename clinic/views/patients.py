"""
Patient profile endpoints.

Doctors and staff may browse patients; a patient only ever sees or edits
their own profile.  Removing a patient keeps the appointment history and
deactivates the account.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.exceptions import ForbiddenError, NotFoundError
from clinic.models import Patient, Role
from clinic.permissions import IsPatientRole, IsStaffOrDoctor
from clinic.serializers.patient import PatientUpdateSerializer
from clinic.services import appointments as appointment_service
from clinic.services import policy
from clinic.services.records import apply_changes, fetch, remove_profile
from clinic.services.representations import appointment_data, patient_data
from clinic.views.common import request_body


def _patient_for(principal, patient: Patient) -> Patient:
    """Patients may only reach their own profile."""
    if principal.user_type == Role.PATIENT:
        policy.ensure_owner(principal, patient.user_id)
    return patient


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffOrDoctor])
def patients(request):
    qs = Patient.objects.select_related('user').filter(user__is_active=True).order_by('id')
    data = [patient_data(p, with_history=False) for p in qs]
    return Response({'success': True, 'data': data, 'count': len(data)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def my_patient_profile(request):
    patient = Patient.objects.select_related('user').filter(user=request.user).first()
    if patient is None:
        raise NotFoundError('Patient profile not found')
    return Response({'success': True, 'data': patient_data(patient)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_by_user(request, user_id: int):
    if request.user.user_type == Role.PATIENT:
        policy.ensure_owner(request.user, user_id)
    patient = fetch(Patient.objects.select_related('user'), None, 'Patient profile not found', user_id=user_id)
    return Response({'success': True, 'data': patient_data(patient)})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def patient_detail(request, patient_id: int):
    principal = request.user
    patient = fetch(Patient.objects.select_related('user'), patient_id, 'Patient not found')

    if request.method == 'DELETE':
        if not policy.is_staff(principal):
            raise ForbiddenError('Access denied. Insufficient permissions.')
        policy.ensure_not_self(principal, patient.user_id)
        remove_profile(patient, actor=principal)
        return Response({'success': True, 'message': 'Patient deleted successfully'})

    _patient_for(principal, patient)
    if request.method == 'PUT':
        s = PatientUpdateSerializer(data=request_body(request), partial=True)
        s.is_valid(raise_exception=True)
        apply_changes(patient, s.validated_data)
        return Response({'success': True, 'message': 'Patient updated successfully', 'data': patient_data(patient)})

    return Response({'success': True, 'data': patient_data(patient)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_appointments(request, patient_id: int):
    patient = _patient_for(request.user, fetch(Patient.objects.all(), patient_id, 'Patient not found'))
    qs = appointment_service.base_queryset().filter(patient=patient).order_by('-appointment_date', '-id')
    data = [appointment_data(a) for a in qs]
    return Response({'success': True, 'data': data, 'count': len(data)})
