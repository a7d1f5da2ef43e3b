from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from orders.serializers import OrderCancelSerializer, OrderSerializer, OrderStatusUpdateSerializer
from orders.services import OrderLifecycleService

logger = logging.getLogger(__name__)


class StatusActionsMixin:
    """
    Mixin for order status transition actions

    This mixin provides action methods for OrderViewSet. Domain errors raised
    by OrderLifecycleService are rendered by the project exception handler.
    """

    def _order_response(self, order) -> Response:
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"], url_path="confirm")
    def confirm(self, request: Request, pk=None) -> Response:
        order = OrderLifecycleService.confirm_order(pk, self.get_tenant_id())
        return self._order_response(order)

    @action(detail=True, methods=["post"], url_path="start-preparing")
    def start_preparing(self, request: Request, pk=None) -> Response:
        order = OrderLifecycleService.start_preparing(pk, self.get_tenant_id())
        return self._order_response(order)

    @action(detail=True, methods=["post"], url_path="mark-ready")
    def mark_ready(self, request: Request, pk=None) -> Response:
        order = OrderLifecycleService.mark_ready(pk, self.get_tenant_id())
        return self._order_response(order)

    @action(detail=True, methods=["post"], url_path="complete")
    def complete(self, request: Request, pk=None) -> Response:
        order = OrderLifecycleService.complete_order(pk, self.get_tenant_id())
        return self._order_response(order)

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request: Request, pk=None) -> Response:
        serializer = OrderCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderLifecycleService.cancel_order(
            pk, self.get_tenant_id(), reason=serializer.validated_data.get("reason")
        )
        return self._order_response(order)

    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request: Request, pk=None) -> Response:
        """Generic transition: {"status": "<target>", "reason": "..."}"""
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderLifecycleService.transition_order(
            pk,
            self.get_tenant_id(),
            serializer.validated_data["status"],
            reason=serializer.validated_data.get("reason"),
        )
        return self._order_response(order)
