"""
Per-account dashboard endpoint.

The payload depends on the account's role: patients see their own
appointment counts, doctors their schedule counts and staff system-wide
totals.  Users may only open their own dashboard unless they are staff.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.models import User
from clinic.services import policy
from clinic.services.records import fetch
from clinic.services.stats import user_dashboard


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request, user_id: int):
    policy.ensure_self_or_staff(request.user, user_id)
    user = fetch(User.objects.all(), user_id, 'User not found')
    return Response({'success': True, 'data': user_dashboard(user)})
