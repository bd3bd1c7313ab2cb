from rest_framework import serializers

from clinic.models import Patient, Role, Staff
from clinic.serializers.fields import (
    AddressSerializer,
    CleanCharField,
    EmergencyContactSerializer,
)


class RegisterSerializer(serializers.Serializer):
    """Shape and type checks for a registration payload.

    Presence rules (which fields each role needs) are enforced by
    :func:`clinic.services.auth.register` so that every caller shares them.
    """
    firstName = CleanCharField(source='first_name', required=False, allow_blank=True, max_length=150)
    lastName = CleanCharField(source='last_name', required=False, allow_blank=True, max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True, trim_whitespace=False)
    userType = serializers.ChoiceField(source='user_type', choices=Role.choices, required=False)
    phone = CleanCharField(required=False, allow_blank=True, max_length=32)

    # doctor
    specialization = CleanCharField(required=False, allow_blank=True, max_length=120)
    experience = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    licenseNumber = CleanCharField(source='license_number', required=False, allow_blank=True, max_length=64)

    # patient
    dateOfBirth = serializers.DateField(source='date_of_birth', required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=Patient.GENDER_CHOICES, required=False, allow_blank=True)
    bloodGroup = CleanCharField(source='blood_group', required=False, allow_blank=True, max_length=5)
    address = AddressSerializer(required=False)
    emergencyContact = EmergencyContactSerializer(source='emergency_contact', required=False)

    # staff
    department = CleanCharField(required=False, allow_blank=True, max_length=120)
    position = CleanCharField(required=False, allow_blank=True, max_length=120)
    employeeId = CleanCharField(source='employee_id', required=False, allow_blank=True, max_length=64)
    shift = serializers.ChoiceField(choices=Staff.SHIFT_CHOICES, required=False, allow_blank=True)


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True, trim_whitespace=False)
