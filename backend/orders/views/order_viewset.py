from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from cart.services import CartService
from core_backend.base import PaginationParamsMixin, TenantContextMixin
from core_backend.exceptions import OrderNotFoundError
from orders.models import Order
from orders.serializers import OrderCreateSerializer, OrderListSerializer, OrderSerializer
from orders.services import OrderQueryService

logger = logging.getLogger(__name__)

# Import action mixins
from .status_actions import StatusActionsMixin


class OrderViewSet(
    StatusActionsMixin,
    TenantContextMixin,
    PaginationParamsMixin,
    viewsets.GenericViewSet,
):
    """
    Orders for the tenant named in the X-Tenant-ID header.

    - GET    /orders/                 open orders
    - GET    /orders/history/         completed and cancelled orders
    - POST   /orders/                 assemble an order from catalog items
    - GET    /orders/{id}/            order detail
    - POST   /orders/{id}/confirm/ ... status transitions (StatusActionsMixin)
    """
    serializer_class = OrderSerializer

    def get_object(self):
        pk = self.kwargs["pk"]
        return Order.objects.get_owned(pk, self.get_tenant_id(), OrderNotFoundError(pk))

    def _page_response(self, page) -> Response:
        return Response({
            "results": OrderListSerializer(page.orders, many=True).data,
            "pagination": page.pagination.as_dict(),
        })

    def list(self, request: Request) -> Response:
        page = OrderQueryService.list_open_orders(
            self.get_tenant_id(),
            limit=self.get_int_param("limit"),
            offset=self.get_int_param("offset", 0),
        )
        return self._page_response(page)

    @action(detail=False, methods=["get"], url_path="history")
    def history(self, request: Request) -> Response:
        page = OrderQueryService.list_order_history(
            self.get_tenant_id(),
            limit=self.get_int_param("limit"),
            offset=self.get_int_param("offset", 0),
            filters=request.query_params,
        )
        return self._page_response(page)

    def retrieve(self, request: Request, pk=None) -> Response:
        return Response(OrderSerializer(self.get_object()).data)

    def create(self, request: Request) -> Response:
        """
        Price the requested items from the catalog and create a draft order.

        Body:
            {"items": [{"product_id", "variant_id", "selections", "quantity", "note"}],
             "customer_name", "table_number", "notes"}
        """
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        tenant_id = self.get_tenant_id()

        cart = CartService.build_cart(tenant_id, data["items"])
        result = CartService.submit_cart(
            cart,
            tenant_id,
            customer_name=data.get("customer_name"),
            table_number=data.get("table_number"),
            notes=data.get("notes"),
        )
        return Response(
            {
                "order": OrderSerializer(result.order).data,
                "pricing": result.pricing.as_dict(),
            },
            status=status.HTTP_201_CREATED,
        )
