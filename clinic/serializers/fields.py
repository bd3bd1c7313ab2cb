import bleach
from rest_framework import ISO_8601, serializers

from clinic.models import default_address, default_emergency_contact

DATE_INPUT_FORMATS = [ISO_8601, '%Y-%m-%d']


def clean_text(v):
    return bleach.clean((v or '').strip(), strip=True)


class CleanCharField(serializers.CharField):
    """CharField that strips markup from free text before it is stored."""

    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))


class AddressSerializer(serializers.Serializer):
    street = CleanCharField(required=False, allow_blank=True, max_length=200)
    city = CleanCharField(required=False, allow_blank=True, max_length=100)
    state = CleanCharField(required=False, allow_blank=True, max_length=100)
    zipCode = CleanCharField(required=False, allow_blank=True, max_length=20)

    def validate(self, attrs):
        return {**default_address(), **attrs}


class EmergencyContactSerializer(serializers.Serializer):
    name = CleanCharField(required=False, allow_blank=True, max_length=150)
    phone = CleanCharField(required=False, allow_blank=True, max_length=32)
    relationship = CleanCharField(required=False, allow_blank=True, max_length=64)

    def validate(self, attrs):
        return {**default_emergency_contact(), **attrs}


class MedicalHistoryEntrySerializer(serializers.Serializer):
    condition = CleanCharField(max_length=200)
    diagnosedDate = serializers.DateField(required=False, allow_null=True)
    status = CleanCharField(required=False, allow_blank=True, max_length=64)

    def validate(self, attrs):
        attrs = dict(attrs)
        if attrs.get('diagnosedDate'):
            attrs['diagnosedDate'] = attrs['diagnosedDate'].isoformat()
        return attrs


class ShiftWindowSerializer(serializers.Serializer):
    start = serializers.RegexField(r'^\d{2}:\d{2}$')
    end = serializers.RegexField(r'^\d{2}:\d{2}$')


class ShiftTimingSerializer(serializers.Serializer):
    morning = ShiftWindowSerializer(required=False)
    evening = ShiftWindowSerializer(required=False)


class MedicineSerializer(serializers.Serializer):
    name = CleanCharField(max_length=200)
    dosage = CleanCharField(required=False, allow_blank=True, max_length=100)
    duration = CleanCharField(required=False, allow_blank=True, max_length=100)


class PrescriptionSerializer(serializers.Serializer):
    medicines = MedicineSerializer(many=True, required=False)
    instructions = CleanCharField(required=False, allow_blank=True)

    def validate(self, attrs):
        return {
            'medicines': [dict(m) for m in attrs.get('medicines', [])],
            'instructions': attrs.get('instructions', ''),
        }
