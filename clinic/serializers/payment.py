import math

from rest_framework import serializers


class CreateOrderSerializer(serializers.Serializer):
    amount = serializers.FloatField()

    def validate_amount(self, v):
        if not math.isfinite(v) or v <= 0:
            raise serializers.ValidationError('Amount must be greater than zero')
        return v
