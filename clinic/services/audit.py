"""
Audit trail for security relevant actions.
"""
from __future__ import annotations

from typing import Any, Optional

from clinic.models import AuditEvent, User


def client_ip(request) -> Optional[str]:
    """First address of ``X-Forwarded-For`` behind a proxy, else the peer."""
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        return forwarded.split(',')[0].strip() or None
    return request.META.get('REMOTE_ADDR')


def log_action(*, user: Optional[User], action: str, object_type: Optional[str] = None,
               object_id: Optional[int] = None, detail: Optional[dict[str, Any]] = None,
               request=None) -> AuditEvent:
    detail = dict(detail or {})
    if request is not None:
        detail.setdefault('ip', client_ip(request))
    return AuditEvent.objects.create(
        user=user if isinstance(user, User) and user.pk else None,
        action=action,
        object_type=object_type,
        object_id=object_id,
        detail=detail,
    )
