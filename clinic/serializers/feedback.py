from rest_framework import serializers

from clinic.models import Feedback
from clinic.serializers.fields import CleanCharField


class FeedbackCreateSerializer(serializers.Serializer):
    doctorId = serializers.IntegerField(source='doctor_id', required=False, allow_null=True)
    appointmentId = serializers.IntegerField(source='appointment_id', required=False, allow_null=True)
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = CleanCharField(required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=Feedback.CATEGORY_CHOICES, required=False)
    isAnonymous = serializers.BooleanField(source='is_anonymous', required=False)


class FeedbackUpdateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(required=False, min_value=1, max_value=5)
    comment = CleanCharField(required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=Feedback.CATEGORY_CHOICES, required=False)
    isAnonymous = serializers.BooleanField(source='is_anonymous', required=False)
    status = serializers.ChoiceField(choices=Feedback.STATUS_CHOICES, required=False)
