"""
Root URL configuration for the MediCare+ backend.

``/api/...`` and ``/health`` come from :mod:`clinic.routers`; the admin,
Prometheus metrics (``/metrics``) and the generated API docs
(``/swagger/``, ``/redoc/``) sit beside them.
"""
from django.contrib import admin
from django.urls import include, path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework.permissions import AllowAny

api_info = openapi.Info(
    title="MediCare+ API",
    default_version='v1',
    description="Accounts, appointments, feedback and payments for the MediCare+ hospital app.",
)

docs = get_schema_view(api_info, public=True, permission_classes=(AllowAny,))

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('clinic.routers')),
    path('', include('django_prometheus.urls')),
    path('swagger/', docs.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', docs.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
