import logging
from dataclasses import dataclass

import requests
from django.conf import settings
from django.utils import timezone

from clinic.exceptions import InternalError

logger = logging.getLogger(__name__)


@dataclass
class Order:
    order_id: str
    amount: int
    currency: str


def to_minor_units(amount: float) -> int:
    """Rupees to paise."""
    return int(round(amount * 100))


def create_order(amount: float) -> Order:
    """Create a Razorpay order for ``amount`` (in rupees).

    The gateway call is a plain passthrough: no retry, and every failure is
    reported as a generic internal error after logging the cause.
    """
    if not settings.RAZORPAY_KEY_ID or not settings.RAZORPAY_KEY_SECRET:
        logger.error('payment gateway keys are not configured')
        raise InternalError('Payment gateway is not configured')

    payload = {
        'amount': to_minor_units(amount),
        'currency': settings.PAYMENT_CURRENCY,
        'receipt': f'rcpt_{int(timezone.now().timestamp() * 1000)}',
    }
    url = f"{settings.RAZORPAY_API_URL.rstrip('/')}/orders"
    try:
        r = requests.post(
            url,
            json=payload,
            auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET),
            timeout=settings.RAZORPAY_TIMEOUT,
        )
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error('razorpay order creation failed: %s', exc)
        raise InternalError('Failed to create payment order')

    order_id = data.get('id')
    if not order_id:
        logger.error('razorpay returned no order id: %s', data)
        raise InternalError('Failed to create payment order')
    return Order(order_id=order_id, amount=data.get('amount', payload['amount']),
                 currency=data.get('currency', payload['currency']))
