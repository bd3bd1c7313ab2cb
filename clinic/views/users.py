"""
Account management endpoints.

Staff manage every account; other users may read and edit only their own.
Accounts are never physically removed: deletion flips ``is_active``.
"""
from __future__ import annotations

from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.exceptions import ConflictError, ForbiddenError
from clinic.models import User
from clinic.permissions import IsStaffRole
from clinic.serializers.auth import RegisterSerializer
from clinic.serializers.user import PRIVILEGED_USER_FIELDS, UserUpdateSerializer
from clinic.services import auth as auth_service
from clinic.services import policy
from clinic.services.records import apply_changes, deactivate_user, fetch
from clinic.services.representations import profile_data, user_data
from clinic.views.common import request_body


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def users(request):
    if request.method == 'POST':
        s = RegisterSerializer(data=request_body(request))
        s.is_valid(raise_exception=True)
        result = auth_service.register(s.validated_data, actor=request.user, with_token=False)
        return Response({
            'success': True,
            'message': 'User created successfully',
            'data': {'user': user_data(result.user), 'profile': profile_data(result.profile)},
        }, status=status.HTTP_201_CREATED)

    data = [user_data(u) for u in User.objects.all()]
    return Response({'success': True, 'data': data, 'count': len(data)})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def user_detail(request, user_id: int):
    principal = request.user
    if request.method == 'DELETE':
        if not policy.is_staff(principal):
            raise ForbiddenError('Access denied. Insufficient permissions.')
        policy.ensure_not_self(principal, user_id)
        user = fetch(User.objects.all(), user_id, 'User not found')
        deactivate_user(user, actor=principal)
        return Response({'success': True, 'message': 'User deactivated successfully'})

    policy.ensure_self_or_staff(principal, user_id)
    user = fetch(User.objects.all(), user_id, 'User not found')

    if request.method == 'PUT':
        body = request_body(request)
        if not policy.is_staff(principal) and PRIVILEGED_USER_FIELDS & set(body.keys()):
            raise ForbiddenError('Only staff can change email, user type or account status')
        s = UserUpdateSerializer(data=body, partial=True)
        s.is_valid(raise_exception=True)
        changes = dict(s.validated_data)
        active = changes.pop('is_active', None)
        _ensure_role_change_allowed(user, changes.get('user_type'))
        if active is False:
            policy.ensure_not_self(principal, user.id, 'You cannot deactivate your own account')
        elif active:
            changes['is_active'] = True

        with transaction.atomic():
            apply_changes(user, changes, conflict_message='User already exists with this email')
            if active is False:
                deactivate_user(user, actor=principal)
        return Response({'success': True, 'message': 'User updated successfully', 'data': user_data(user)})

    return Response({'success': True, 'data': user_data(user)})


def _ensure_role_change_allowed(user: User, role) -> None:
    """A profile belongs to one role, so the type is fixed once it exists."""
    if role and role != user.user_type and auth_service.profile_for(user) is not None:
        raise ConflictError('User type cannot be changed while the account has a profile')
