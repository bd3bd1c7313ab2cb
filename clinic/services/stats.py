"""
Read-only aggregates over appointments and feedback.

"Today" is the local calendar day in ``TIME_ZONE``: local midnight up to,
but excluding, the next local midnight.
"""
from __future__ import annotations

from datetime import timedelta

from django.db.models import Avg, Count, Q
from django.utils import timezone

from clinic.models import Appointment, Doctor, Feedback, Role, User
from clinic.services.auth import profile_for
from clinic.services.representations import doctor_data, profile_data, user_data

SCHEDULED = Appointment.STATUS_SCHEDULED
COMPLETED = Appointment.STATUS_COMPLETED
CANCELLED = Appointment.STATUS_CANCELLED


def today_window(now=None):
    start = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def _counters(prefix: str = '') -> dict:
    """Count aggregates, optionally across the ``prefix`` relation."""
    start, end = today_window()
    field = f'{prefix}__' if prefix else ''
    target = prefix or 'id'
    return {
        'totalAppointments': Count(target),
        'todayAppointments': Count(target, filter=Q(**{
            f'{field}appointment_date__gte': start, f'{field}appointment_date__lt': end,
        })),
        'pendingAppointments': Count(target, filter=Q(**{f'{field}status': SCHEDULED})),
        'completedAppointments': Count(target, filter=Q(**{f'{field}status': COMPLETED})),
    }


def doctors_with_stats() -> list[dict]:
    """Every doctor with its appointment counters, in one grouped query."""
    counters = _counters('appointments')
    qs = Doctor.objects.select_related('user').annotate(**counters).order_by('id')
    return [
        {**doctor_data(d), **{name: getattr(d, name) for name in counters}}
        for d in qs
    ]


def doctor_stats(doctor: Doctor) -> dict:
    stats = Appointment.objects.filter(doctor=doctor).aggregate(
        **_counters(),
        cancelledAppointments=Count('id', filter=Q(status=CANCELLED)),
        totalPatients=Count('patient', distinct=True),
    )
    feedback = Feedback.objects.filter(doctor=doctor).aggregate(avg=Avg('rating'), n=Count('id'))
    stats['averageRating'] = round(feedback['avg'], 1) if feedback['n'] else 0
    stats['totalFeedback'] = feedback['n']
    return stats


def user_dashboard(user: User) -> dict:
    profile = profile_for(user)
    start, end = today_window()

    if user.user_type == Role.PATIENT:
        qs = Appointment.objects.filter(patient=profile) if profile else Appointment.objects.none()
        stats = qs.aggregate(
            totalAppointments=Count('id'),
            upcomingAppointments=Count('id', filter=Q(appointment_date__gt=timezone.now()) & ~Q(status=CANCELLED)),
            completedAppointments=Count('id', filter=Q(status=COMPLETED)),
        )
    elif user.user_type == Role.DOCTOR:
        qs = Appointment.objects.filter(doctor=profile) if profile else Appointment.objects.none()
        stats = qs.aggregate(
            totalAppointments=Count('id'),
            todayAppointments=Count('id', filter=Q(appointment_date__gte=start, appointment_date__lt=end)),
            pendingAppointments=Count('id', filter=Q(status=SCHEDULED)),
        )
    else:
        stats = {
            'totalUsers': User.objects.count(),
            'totalAppointments': Appointment.objects.count(),
            'todayAppointments': Appointment.objects.filter(
                appointment_date__gte=start, appointment_date__lt=end
            ).count(),
        }

    return {'user': user_data(user), 'stats': stats, 'profile': profile_data(profile)}
