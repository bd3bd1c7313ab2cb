from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from clinic.serializers.payment import CreateOrderSerializer
from clinic.services.payments import create_order


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def create_payment_order(request):
    """Create a gateway order; ``amount`` is in rupees, the order in paise."""
    s = CreateOrderSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    order = create_order(s.validated_data['amount'])
    return Response({
        'success': True,
        'data': {'orderId': order.order_id, 'amount': order.amount, 'currency': order.currency},
    })
