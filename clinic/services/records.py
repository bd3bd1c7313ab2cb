"""
Generic record helpers: lookup, partial update and profile removal.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import Model, QuerySet

from clinic.exceptions import ConflictError, NotFoundError
from clinic.models import Doctor, User
from clinic.services.audit import log_action

logger = logging.getLogger(__name__)


def fetch(queryset: QuerySet, pk, message: str = 'Not found', **lookup):
    """Single record by primary key (or ``lookup``) or :class:`NotFoundError`."""
    try:
        if lookup:
            return queryset.get(**lookup)
        return queryset.get(pk=int(pk))
    except (queryset.model.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(message)


def apply_changes(instance: Model, changes: dict, *, conflict_message: str = 'Resource already exists') -> Model:
    """Apply validated ``changes`` and save after full model validation.

    Uniqueness is left to the database so that duplicates surface as 409
    rather than as a validation failure.
    """
    for attr, value in changes.items():
        setattr(instance, attr, value)
    instance.full_clean(validate_unique=False)
    try:
        with transaction.atomic():
            instance.save()
    except IntegrityError:
        raise ConflictError(conflict_message)
    return instance


def deactivate_user(user: User, *, actor: Optional[User]) -> User:
    """Soft delete: the account can no longer log in and a doctor stops
    taking bookings, while every row referencing it stays intact."""
    with transaction.atomic():
        if user.is_active:
            user.is_active = False
            user.save(update_fields=['is_active'])
        Doctor.objects.filter(user=user, is_available=True).update(is_available=False)
    logger.info('user %s deactivated by %s', user.id, getattr(actor, 'id', None))
    log_action(user=actor, action='deactivate', object_type='user', object_id=user.id)
    return user


def remove_profile(profile, *, actor: Optional[User]) -> None:
    """Retire a Patient/Doctor/Staff profile by deactivating its account."""
    deactivate_user(profile.user, actor=actor)
    log_action(user=actor, action='delete', object_type=profile.__class__.__name__.lower(), object_id=profile.id)
