"""
Account registration, login and token handling.

Tokens are simplejwt access tokens carrying ``userId``, ``email`` and
``userType`` and expire after ``SIMPLE_JWT['ACCESS_TOKEN_LIFETIME']``
(24 hours by default).  There are no refresh tokens; clients log in again.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from django.contrib.auth import authenticate
from django.db import IntegrityError, transaction
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

from clinic.exceptions import AuthError, ConflictError, ValidationError
from clinic.models import Doctor, Patient, Role, Staff, User, normalize_email
from clinic.services.audit import log_action

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid email or password'

PATIENT_FIELDS = ('date_of_birth', 'gender', 'blood_group', 'address', 'emergency_contact')


@dataclass
class AuthResult:
    user: User
    profile: Any
    token: str


def issue_token(user: User) -> str:
    token = AccessToken.for_user(user)
    token['userId'] = user.id
    token['email'] = user.email
    token['userType'] = user.user_type
    return str(token)


def verify(raw_token: str) -> dict:
    """Return the claims of a valid token or raise :class:`AuthError`."""
    try:
        token = AccessToken(raw_token)
    except TokenError:
        raise AuthError('Invalid or expired token')
    return dict(token.payload)


def resolve_principal(raw_token: str) -> User:
    claims = verify(raw_token)
    user = User.objects.filter(pk=claims.get('userId')).defer('password').first()
    if user is None or not user.is_active:
        raise AuthError('User not found or inactive')
    return user


def profile_for(user: User):
    """The role profile paired with ``user`` or ``None``."""
    model = {Role.PATIENT: Patient, Role.DOCTOR: Doctor, Role.STAFF: Staff}.get(user.user_type)
    if model is None:
        return None
    return model.objects.select_related('user').filter(user=user).first()


def _missing(data: dict, *fields: str) -> bool:
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            return True
    return False


def register(data: dict, *, actor: Optional[User] = None, with_token: bool = True) -> AuthResult:
    """Create an account and its role profile.

    ``data`` uses model attribute names (``first_name``, ``user_type`` ...)
    as produced by :class:`clinic.serializers.auth.RegisterSerializer`.
    """
    if _missing(data, 'first_name', 'last_name', 'email', 'password'):
        raise ValidationError('First name, last name, email, and password are required')

    role = data.get('user_type') or Role.PATIENT
    if role not in Role.values:
        raise ValidationError('Invalid user type')
    if role == Role.DOCTOR and _missing(data, 'specialization', 'experience', 'license_number'):
        raise ValidationError('Specialization, experience, and license number are required for doctors')

    email = normalize_email(data['email'])
    if User.objects.filter(email__iexact=email).exists():
        raise ConflictError('User already exists with this email')
    if role == Role.DOCTOR and Doctor.objects.filter(license_number=data['license_number']).exists():
        raise ConflictError('A doctor with this license number already exists')

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=data['password'],
                first_name=data['first_name'],
                last_name=data['last_name'],
                user_type=role,
                phone=data.get('phone') or '',
                specialization=data.get('specialization') or '',
                experience=data.get('experience') or 0,
                license_number=data.get('license_number') or '',
            )
            profile = _create_profile(user, data)
    except IntegrityError:
        raise ConflictError('User already exists with this email')

    logger.info('registered %s account %s', role, user.id)
    log_action(user=actor or user, action='register', object_type='user', object_id=user.id,
               detail={'userType': role})
    return AuthResult(user=user, profile=profile, token=issue_token(user) if with_token else '')


def _create_profile(user: User, data: dict):
    if user.user_type == Role.DOCTOR:
        return Doctor.objects.create(
            user=user,
            specialization=data['specialization'],
            license_number=data['license_number'],
            experience=data['experience'],
            department=data.get('department') or data['specialization'],
        )
    if user.user_type == Role.STAFF:
        return Staff.objects.create(
            user=user,
            department=data.get('department') or 'General',
            position=data.get('position') or 'Staff',
            employee_id=data.get('employee_id') or f'EMP{user.id:05d}',
            shift=data.get('shift') or '',
        )
    extra = {f: data[f] for f in PATIENT_FIELDS if data.get(f) is not None}
    return Patient.objects.create(user=user, **extra)


def login(email: str, password: str, *, request=None) -> AuthResult:
    if not email or not password:
        raise ValidationError('Email and password are required')

    # ModelBackend rejects inactive accounts and runs the hasher for
    # unknown emails too, so every failure looks and takes the same
    user = authenticate(request, email=normalize_email(email), password=password)
    if user is None:
        logger.info('login failed for %s', normalize_email(email))
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'email': normalize_email(email)}, request=request)
        raise AuthError(INVALID_CREDENTIALS)

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok'}, request=request)
    return AuthResult(user=user, profile=profile_for(user), token=issue_token(user))
