from rest_framework import serializers

from clinic.models import Patient
from clinic.serializers.fields import (
    AddressSerializer,
    CleanCharField,
    EmergencyContactSerializer,
    MedicalHistoryEntrySerializer,
)


class PatientUpdateSerializer(serializers.Serializer):
    dateOfBirth = serializers.DateField(source='date_of_birth', required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=Patient.GENDER_CHOICES, required=False, allow_blank=True)
    bloodGroup = CleanCharField(source='blood_group', required=False, allow_blank=True, max_length=5)
    address = AddressSerializer(required=False)
    emergencyContact = EmergencyContactSerializer(source='emergency_contact', required=False)
    medicalHistory = MedicalHistoryEntrySerializer(source='medical_history', many=True, required=False)

    def validate_medicalHistory(self, v):
        return [dict(entry) for entry in v]
