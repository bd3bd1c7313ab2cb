from rest_framework import serializers

from clinic.models import Appointment
from clinic.serializers.fields import DATE_INPUT_FORMATS, CleanCharField, PrescriptionSerializer


class AppointmentCreateSerializer(serializers.Serializer):
    doctorId = serializers.IntegerField(source='doctor_id')
    patientId = serializers.IntegerField(source='patient_id', required=False, allow_null=True)
    appointmentDate = serializers.DateTimeField(source='appointment_date', input_formats=DATE_INPUT_FORMATS)
    appointmentTime = CleanCharField(source='appointment_time', max_length=32)
    reason = CleanCharField()
    notes = CleanCharField(required=False, allow_blank=True)


class AppointmentUpdateSerializer(serializers.Serializer):
    appointmentDate = serializers.DateTimeField(
        source='appointment_date', required=False, input_formats=DATE_INPUT_FORMATS
    )
    appointmentTime = CleanCharField(source='appointment_time', required=False, max_length=32)
    reason = CleanCharField(required=False)
    status = serializers.ChoiceField(choices=Appointment.STATUS_CHOICES, required=False)
    notes = CleanCharField(required=False, allow_blank=True)
    prescription = PrescriptionSerializer(required=False)


class AppointmentListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Appointment.STATUS_CHOICES, required=False)
