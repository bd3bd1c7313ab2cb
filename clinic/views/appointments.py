"""
Appointment endpoints.

Listing is scoped by role (staff: all, doctor/patient: their own).
Patients book for themselves; staff book on a patient's behalf by passing
``patientId``.  A patient's only possible change is cancelling.
"""
from __future__ import annotations

from django.http import HttpResponse
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.exceptions import ForbiddenError
from clinic.models import Role
from clinic.permissions import IsStaffRole
from clinic.serializers.appointment import (
    AppointmentCreateSerializer,
    AppointmentListQuerySerializer,
    AppointmentUpdateSerializer,
)
from clinic.services import appointments as appointment_service
from clinic.services import policy
from clinic.services.records import fetch
from clinic.services.representations import appointment_data
from clinic.views.common import request_body


def _appointment(appointment_id):
    return fetch(appointment_service.base_queryset(), appointment_id, 'Appointment not found')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def appointments(request):
    if request.method == 'POST':
        return _create(request)

    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = appointment_service.scoped_queryset(request.user, status=q.validated_data.get('status'))
    data = [appointment_data(a) for a in qs]
    return Response({'success': True, 'data': data, 'count': len(data)})


def _create(request):
    if request.user.user_type not in (Role.PATIENT, Role.STAFF):
        raise ForbiddenError('Access denied. Insufficient permissions.')
    s = AppointmentCreateSerializer(data=request_body(request))
    s.is_valid(raise_exception=True)
    appointment = appointment_service.create_appointment(request.user, s.validated_data)
    return Response({
        'success': True,
        'message': 'Appointment booked successfully',
        'data': appointment_data(appointment),
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffRole])
def export_appointments(request):
    """Download every appointment as CSV."""
    qs = appointment_service.base_queryset().order_by('-appointment_date', '-id')
    resp = HttpResponse(appointment_service.export_csv(qs), content_type='text/csv; charset=utf-8')
    resp['Content-Disposition'] = f'attachment; filename="appointments-{timezone.localdate():%Y%m%d}.csv"'
    return resp


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def appointment_detail(request, appointment_id: int):
    principal = request.user
    appointment = _appointment(appointment_id)

    if request.method == 'DELETE':
        appointment = appointment_service.delete_appointment(principal, appointment)
        return Response({
            'success': True,
            'message': 'Appointment cancelled successfully',
            'data': appointment_data(appointment),
        })

    if request.method == 'PUT':
        body = request_body(request)
        appointment_service.authorize_update(principal, appointment, body)
        s = AppointmentUpdateSerializer(data=body, partial=True)
        s.is_valid(raise_exception=True)
        appointment = appointment_service.update_appointment(appointment, s.validated_data)
        return Response({
            'success': True,
            'message': 'Appointment updated successfully',
            'data': appointment_data(appointment),
        })

    policy.ensure_appointment_access(principal, appointment)
    return Response({'success': True, 'data': appointment_data(appointment)})
