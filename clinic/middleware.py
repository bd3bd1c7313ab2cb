from django.http import JsonResponse
from django.urls import Resolver404, resolve


class UnknownApiRouteMiddleware:
    """Answer unknown ``/api/`` paths with the JSON error envelope.

    Django's own 404 page is HTML; API clients expect
    ``{"success": false, "message": ...}`` everywhere under ``/api/``.
    """
    API_PREFIX = '/api/'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        path = request.path_info or ''
        if path.startswith(self.API_PREFIX):
            try:
                resolve(path)
            except Resolver404:
                return JsonResponse(
                    {'success': False, 'message': f'Route {request.method} {path} not found'},
                    status=404,
                )
        return self.get_response(request)
