from typing import Optional

from django.db.models import QuerySet

from clinic.models import Doctor


def list_doctors(*, available: Optional[bool] = None, specialization: Optional[str] = None) -> QuerySet:
    """Doctors with active accounts, optionally filtered.

    ``specialization`` is matched case-insensitively as a substring.
    """
    qs = Doctor.objects.select_related('user').filter(user__is_active=True)
    if available is not None:
        qs = qs.filter(is_available=available)
    if specialization:
        qs = qs.filter(specialization__icontains=specialization)
    return qs.order_by('id')
