"""
Bearer token authentication for the REST API.

Kept apart from the views so that DRF can import the authentication class
from settings without pulling in view modules (circular imports).
"""
from __future__ import annotations

from rest_framework import authentication

from clinic.exceptions import AuthError
from clinic.services.auth import resolve_principal


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """Authenticate ``Authorization: Bearer <token>`` headers.

    Requests without the header stay anonymous so that open endpoints keep
    working; ``IsAuthenticated`` turns that into a 401 where needed.
    """

    keyword = 'Bearer'

    def authenticate(self, request):
        auth = authentication.get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None
        if len(auth) != 2:
            raise AuthError('Invalid or expired token')
        try:
            raw = auth[1].decode()
        except UnicodeError:
            raise AuthError('Invalid or expired token')
        return resolve_principal(raw), raw

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
