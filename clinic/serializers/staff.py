from rest_framework import serializers

from clinic.models import Staff
from clinic.serializers.fields import CleanCharField


class StaffUpdateSerializer(serializers.Serializer):
    department = CleanCharField(required=False, max_length=120)
    position = CleanCharField(required=False, max_length=120)
    employeeId = CleanCharField(source='employee_id', required=False, max_length=64)
    shift = serializers.ChoiceField(choices=Staff.SHIFT_CHOICES, required=False, allow_blank=True)
    salary = serializers.DecimalField(required=False, allow_null=True, max_digits=12, decimal_places=2, min_value=0)
    joiningDate = serializers.DateField(source='joining_date', required=False)
