from rest_framework import serializers

from clinic.serializers.fields import CleanCharField, ShiftTimingSerializer


class DoctorUpdateSerializer(serializers.Serializer):
    specialization = CleanCharField(required=False, max_length=120)
    qualification = CleanCharField(required=False, max_length=120)
    licenseNumber = CleanCharField(source='license_number', required=False, max_length=64)
    experience = serializers.IntegerField(required=False, min_value=0)
    department = CleanCharField(required=False, max_length=120)
    consultationFee = serializers.DecimalField(
        source='consultation_fee', required=False, max_digits=10, decimal_places=2, min_value=0
    )
    isAvailable = serializers.BooleanField(source='is_available', required=False)
    shiftTiming = ShiftTimingSerializer(source='shift_timing', required=False)

    def validate_shiftTiming(self, v):
        return {k: dict(w) for k, w in v.items()}

