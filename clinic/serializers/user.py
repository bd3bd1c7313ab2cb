from rest_framework import serializers

from clinic.models import Role
from clinic.serializers.fields import CleanCharField

# Only staff may change these on an account
PRIVILEGED_USER_FIELDS = {'email', 'userType', 'isActive'}


class UserUpdateSerializer(serializers.Serializer):
    firstName = CleanCharField(source='first_name', required=False, max_length=150)
    lastName = CleanCharField(source='last_name', required=False, max_length=150)
    email = serializers.EmailField(required=False)
    userType = serializers.ChoiceField(source='user_type', choices=Role.choices, required=False)
    phone = CleanCharField(required=False, allow_blank=True, max_length=32)
    specialization = CleanCharField(required=False, allow_blank=True, max_length=120)
    experience = serializers.IntegerField(required=False, min_value=0)
    licenseNumber = CleanCharField(source='license_number', required=False, allow_blank=True, max_length=64)
    isActive = serializers.BooleanField(source='is_active', required=False)

    def validate_email(self, v):
        return v.strip().lower()
