"""
Error taxonomy for the API.

Every error leaves the API as ``{"success": false, "message": "..."}``
with the status code of its class; the rendering lives in
:mod:`clinic.handlers`.

This module must not import ``rest_framework.views``: the authentication
class raises :class:`AuthError` and is itself loaded while DRF builds its
view defaults.
"""
from rest_framework import exceptions, status


class ValidationError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid request'
    default_code = 'validation_error'


# Not AuthenticationFailed: DRF turns that into 403 on views without authenticators
class AuthError(exceptions.APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid or expired token'
    default_code = 'auth_error'


class ForbiddenError(exceptions.APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Access denied'
    default_code = 'forbidden'


class NotFoundError(exceptions.APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found'
    default_code = 'not_found'


class ConflictError(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists'
    default_code = 'conflict'


class InternalError(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Internal server error'
    default_code = 'internal_error'
