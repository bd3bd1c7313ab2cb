from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.exceptions import NotFoundError
from clinic.models import Staff
from clinic.permissions import IsStaffRole
from clinic.serializers.staff import StaffUpdateSerializer
from clinic.services import policy
from clinic.services.records import apply_changes, fetch, remove_profile
from clinic.services.representations import staff_data
from clinic.views.common import request_body


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffRole])
def staff_list(request):
    qs = Staff.objects.select_related('user').filter(user__is_active=True).order_by('id')
    data = [staff_data(s, with_salary=False) for s in qs]
    return Response({'success': True, 'data': data, 'count': len(data)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffRole])
def my_staff_profile(request):
    staff = Staff.objects.select_related('user').filter(user=request.user).first()
    if staff is None:
        raise NotFoundError('Staff profile not found')
    return Response({'success': True, 'data': staff_data(staff)})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsStaffRole])
def staff_detail(request, staff_id: int):
    staff = fetch(Staff.objects.select_related('user'), staff_id, 'Staff member not found')

    if request.method == 'DELETE':
        policy.ensure_not_self(request.user, staff.user_id)
        remove_profile(staff, actor=request.user)
        return Response({'success': True, 'message': 'Staff member deleted successfully'})

    if request.method == 'PUT':
        s = StaffUpdateSerializer(data=request_body(request), partial=True)
        s.is_valid(raise_exception=True)
        apply_changes(staff, s.validated_data, conflict_message='A staff member with this employee id already exists')
        return Response({'success': True, 'message': 'Staff member updated successfully', 'data': staff_data(staff)})

    return Response({'success': True, 'data': staff_data(staff)})
