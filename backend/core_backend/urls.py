"""
URL configuration for core_backend project.

    /api/health/                                health check
    /api/orders/ ...                            orders, payments, kitchen tickets
    /admin/                                     Django admin
"""

from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    # The 'orders' app registers its base endpoint as 'orders',
    # so the final path is /api/orders/
    path("api/", include("orders.urls")),
]
