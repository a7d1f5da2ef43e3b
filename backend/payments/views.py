from rest_framework import status, viewsets
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from core_backend.base import TenantContextMixin
from core_backend.exceptions import OrderNotFoundError
from orders.models import Order
from orders.serializers import OrderSerializer
from payments.models import Payment
from payments.serializers import PaymentSerializer, RecordPaymentSerializer
from payments.services import PaymentReconciliationService

logger = logging.getLogger(__name__)


class OrderPaymentViewSet(TenantContextMixin, viewsets.GenericViewSet):
    """
    Payments of a single order.

    - GET  /orders/{order_pk}/payments/   payments recorded so far
    - POST /orders/{order_pk}/payments/   record a (partial) payment
    """
    serializer_class = PaymentSerializer

    def get_queryset(self):
        return Payment.objects.for_tenant(self.get_tenant_id()).select_related("order")

    def list(self, request: Request, order_pk=None) -> Response:
        order = Order.objects.get_owned(order_pk, self.get_tenant_id(), OrderNotFoundError(order_pk))
        payments = self.get_queryset().filter(order=order)
        return Response({
            "results": PaymentSerializer(payments, many=True).data,
            "paid_amount": str(order.paid_amount),
            "remaining_amount": str(order.remaining_amount),
            "payment_status": order.payment_status,
        })

    def create(self, request: Request, order_pk=None) -> Response:
        serializer = RecordPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = PaymentReconciliationService.record_payment(
            order_pk,
            self.get_tenant_id(),
            data["amount"],
            data["method"],
            transaction_ref=data.get("transaction_ref"),
            notes=data.get("notes"),
        )
        return Response(
            {
                "payment": PaymentSerializer(result.payment).data,
                "order": OrderSerializer(result.order).data,
                "remaining_amount": str(result.remaining_amount),
            },
            status=status.HTTP_201_CREATED,
        )
