"""
Registration, login and current-account endpoints.

These live outside ``clinic.views`` so that the authentication class in
``clinic.authentication`` can be imported by DRF settings without dragging
the views (and their serializers) along.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from clinic.models import Role
from clinic.serializers.auth import LoginSerializer, RegisterSerializer
from clinic.services import auth as auth_service
from clinic.services.representations import profile_data, user_data
from clinic.throttling import LoginRateThrottle, RegisterRateThrottle


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([RegisterRateThrottle])
def register_view(request):
    """Create a patient, doctor or staff account and log it in."""
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    result = auth_service.register(s.validated_data)

    is_doctor = result.user.user_type == Role.DOCTOR
    return Response({
        'success': True,
        'message': 'Doctor registered successfully' if is_doctor else 'User registered successfully',
        'token': result.token,
        'user': user_data(result.user),
        'profile': profile_data(result.profile),
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    result = auth_service.login(vd.get('email'), vd.get('password'), request=request)
    return Response({
        'success': True,
        'message': 'Login successful',
        'token': result.token,
        'user': user_data(result.user),
        'profile': profile_data(result.profile),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    user = request.user
    return Response({
        'success': True,
        'data': {'user': user_data(user), 'profile': profile_data(auth_service.profile_for(user))},
    })
