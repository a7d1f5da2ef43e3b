from rest_framework import status, viewsets
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from core_backend.base import TenantContextMixin
from core_backend.exceptions import OrderNotFoundError
from kds.models import KitchenTicket
from kds.serializers import IssueTicketSerializer, KitchenTicketSerializer
from kds.services import KitchenTicketService
from orders.models import Order

logger = logging.getLogger(__name__)


class OrderKitchenTicketViewSet(TenantContextMixin, viewsets.GenericViewSet):
    """
    Kitchen tickets of a single order.

    - GET  /orders/{order_pk}/kitchen-tickets/   tickets issued so far
    - POST /orders/{order_pk}/kitchen-tickets/   send pending items to the kitchen
    """
    serializer_class = KitchenTicketSerializer

    def get_queryset(self):
        return KitchenTicket.objects.for_tenant(self.get_tenant_id()).select_related("order")

    def list(self, request: Request, order_pk=None) -> Response:
        order = Order.objects.get_owned(order_pk, self.get_tenant_id(), OrderNotFoundError(order_pk))
        tickets = self.get_queryset().for_order(order)
        return Response({"results": KitchenTicketSerializer(tickets, many=True).data})

    def create(self, request: Request, order_pk=None) -> Response:
        serializer = IssueTicketSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ticket = KitchenTicketService.issue_ticket(
            order_pk,
            self.get_tenant_id(),
            priority=serializer.validated_data["priority"],
        )
        return Response(KitchenTicketSerializer(ticket).data, status=status.HTTP_201_CREATED)
