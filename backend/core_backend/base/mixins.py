from django.conf import settings

from core_backend.exceptions import POSValidationError


class TenantContextMixin:
    """
    Resolves the tenant id for a request from the X-Tenant-ID header.

    The id is returned to the view and passed explicitly into every service
    call; it is never stored in module or thread-local state.

    Usage:
        class OrderViewSet(TenantContextMixin, viewsets.GenericViewSet):
            def list(self, request):
                page = OrderQueryService.list_open_orders(self.get_tenant_id())
    """

    tenant_header = None

    def get_tenant_id(self):
        header = self.tenant_header or getattr(settings, 'TENANT_HEADER', 'HTTP_X_TENANT_ID')
        tenant_id = self.request.META.get(header, '').strip()
        if not tenant_id:
            # FAIL LOUD: tenant-scoped endpoints never fall back to a default tenant
            raise POSValidationError("X-Tenant-ID header is required")
        return tenant_id


class PaginationParamsMixin:
    """Reads `limit` and `offset` query parameters as integers."""

    def get_int_param(self, name, default=None):
        raw = self.request.query_params.get(name)
        if raw in (None, ''):
            return default
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise POSValidationError(f"{name} must be an integer, got '{raw}'")
