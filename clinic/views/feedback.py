"""
Feedback endpoints.

Reading is public; anonymous feedback is shown without its patient unless
the reader is staff or the author.  Only patients submit feedback.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response

from clinic.exceptions import ForbiddenError
from clinic.models import Role
from clinic.serializers.feedback import FeedbackCreateSerializer, FeedbackUpdateSerializer
from clinic.services import feedback as feedback_service
from clinic.services import policy
from clinic.services.records import fetch
from clinic.services.representations import feedback_data
from clinic.views.common import request_body


def _reveal(request, feedback) -> bool:
    user = request.user
    if not (user and user.is_authenticated):
        return False
    if policy.is_staff(user):
        return True
    return feedback.patient is not None and feedback.patient.user_id == user.id


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def feedback_list(request):
    if request.method == 'POST':
        if request.user.user_type != Role.PATIENT:
            raise ForbiddenError('Only patients can submit feedback')
        s = FeedbackCreateSerializer(data=request_body(request))
        s.is_valid(raise_exception=True)
        fb = feedback_service.create_feedback(request.user, s.validated_data)
        return Response({
            'success': True,
            'message': 'Feedback submitted successfully',
            'data': feedback_data(fb, reveal_patient=True),
        }, status=status.HTTP_201_CREATED)

    data = [feedback_data(fb, reveal_patient=_reveal(request, fb)) for fb in feedback_service.base_queryset()]
    return Response({'success': True, 'data': data, 'count': len(data)})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def feedback_detail(request, feedback_id: int):
    fb = fetch(feedback_service.base_queryset(), feedback_id, 'Feedback not found')

    if request.method == 'DELETE':
        feedback_service.delete_feedback(request.user, fb)
        return Response({'success': True, 'message': 'Feedback deleted successfully'})

    if request.method == 'PUT':
        policy.ensure_feedback_access(request.user, fb)
        s = FeedbackUpdateSerializer(data=request_body(request), partial=True)
        s.is_valid(raise_exception=True)
        fb = feedback_service.update_feedback(request.user, fb, s.validated_data)
        return Response({
            'success': True,
            'message': 'Feedback updated successfully',
            'data': feedback_data(fb, reveal_patient=True),
        })

    return Response({'success': True, 'data': feedback_data(fb, reveal_patient=_reveal(request, fb))})
