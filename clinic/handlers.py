"""
Unified API exception handler (``REST_FRAMEWORK['EXCEPTION_HANDLER']``).

Database duplicate-key failures are reported as conflicts; anything
unexpected is logged with its traceback and answered with a generic
message.
"""
from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.http import Http404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from clinic.exceptions import ConflictError, InternalError, ValidationError

logger = logging.getLogger(__name__)


def _first_message(detail) -> str:
    """Flatten DRF error details into a single human readable line."""
    if isinstance(detail, dict):
        if 'detail' in detail:
            return _first_message(detail['detail'])
        parts = []
        for field, value in detail.items():
            msg = _first_message(value)
            parts.append(msg if field == 'non_field_errors' else f'{field}: {msg}')
        return '; '.join(parts)
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    if isinstance(exc, IntegrityError):
        logger.warning('integrity error on %s: %s', _view_name(context), exc)
        exc = ConflictError()
    elif isinstance(exc, DjangoValidationError):
        exc = ValidationError(
            _first_message(exc.message_dict if hasattr(exc, 'error_dict') else exc.messages)
        )

    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', _view_name(context), exc_info=exc)
        return Response(
            {'success': False, 'message': InternalError.default_detail},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    if isinstance(exc, InternalError):
        logger.error('internal error in %s: %s', _view_name(context), exc.detail)
    if isinstance(exc, (Http404, DjangoPermissionDenied)):
        message = 'Not found' if isinstance(exc, Http404) else 'Access denied'
    else:
        message = _first_message(resp.data)
    return Response({'success': False, 'message': message}, status=resp.status_code, headers=_auth_headers(resp))


def _auth_headers(resp) -> dict:
    header = resp.headers.get('WWW-Authenticate')
    return {'WWW-Authenticate': header} if header else {}


def _view_name(context) -> str:
    view = (context or {}).get('view')
    return view.__class__.__name__ if view is not None else 'unknown view'
