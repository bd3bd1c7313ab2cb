"""
Doctor directory and doctor profile management.

Listing and single lookups are public so that visitors can browse doctors
before signing up; changes need the owning doctor or staff.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from clinic.exceptions import ConflictError, ForbiddenError, NotFoundError
from clinic.models import Doctor, Role
from clinic.permissions import IsDoctorRole
from clinic.serializers.doctor import DoctorUpdateSerializer
from clinic.services import appointments as appointment_service
from clinic.services import policy
from clinic.services.doctors import list_doctors
from clinic.services.records import apply_changes, fetch, remove_profile
from clinic.services.representations import appointment_data, doctor_data
from clinic.services.stats import doctor_stats, doctors_with_stats
from clinic.views.common import query_flag, request_body


def _doctor(doctor_id) -> Doctor:
    return fetch(Doctor.objects.select_related('user'), doctor_id, 'Doctor not found')


@api_view(['GET'])
@permission_classes([AllowAny])
def doctors(request):
    """List doctors.

    Query params:
      - available: true|false (only doctors accepting bookings, or not)
      - specialization: substring match
    """
    qs = list_doctors(
        available=query_flag(request.query_params.get('available')),
        specialization=(request.query_params.get('specialization') or '').strip() or None,
    )
    data = [doctor_data(d) for d in qs]
    return Response({'success': True, 'data': data, 'count': len(data)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctors_stats(request):
    data = doctors_with_stats()
    return Response({'success': True, 'data': data, 'count': len(data)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def my_doctor_profile(request):
    doctor = Doctor.objects.select_related('user').filter(user=request.user).first()
    if doctor is None:
        raise NotFoundError('Doctor profile not found')
    return Response({'success': True, 'data': doctor_data(doctor)})


@api_view(['GET'])
@permission_classes([AllowAny])
def doctor_by_user(request, user_id: int):
    doctor = fetch(Doctor.objects.select_related('user'), None, 'Doctor profile not found', user_id=user_id)
    return Response({'success': True, 'data': doctor_data(doctor)})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def doctor_detail(request, doctor_id: int):
    if request.method == 'GET':
        return Response({'success': True, 'data': doctor_data(_doctor(doctor_id))})

    principal = request.user
    doctor = _doctor(doctor_id)

    if request.method == 'DELETE':
        if not policy.is_staff(principal):
            raise ForbiddenError('Access denied. Insufficient permissions.')
        policy.ensure_not_self(principal, doctor.user_id)
        remove_profile(doctor, actor=principal)
        return Response({'success': True, 'message': 'Doctor deleted successfully'})

    if not policy.is_staff(principal):
        policy.ensure_owner(principal, doctor.user_id)
    s = DoctorUpdateSerializer(data=request_body(request), partial=True)
    s.is_valid(raise_exception=True)
    if s.validated_data.get('is_available') and not doctor.user.is_active:
        raise ConflictError('A deactivated doctor cannot be made available')
    apply_changes(doctor, s.validated_data, conflict_message='A doctor with this license number already exists')
    return Response({'success': True, 'message': 'Doctor updated successfully', 'data': doctor_data(doctor)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctor_stats_view(request, doctor_id: int):
    return Response({'success': True, 'data': doctor_stats(_doctor(doctor_id))})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def doctor_appointments(request, doctor_id: int):
    doctor = _doctor(doctor_id)
    principal = request.user
    if principal.user_type == Role.DOCTOR:
        policy.ensure_owner(principal, doctor.user_id)
    elif principal.user_type != Role.STAFF:
        raise ForbiddenError('Access denied. Insufficient permissions.')
    qs = appointment_service.base_queryset().filter(doctor=doctor).order_by('-appointment_date', '-id')
    data = [appointment_data(a) for a in qs]
    return Response({'success': True, 'data': data, 'count': len(data)})
