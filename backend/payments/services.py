from dataclasses import dataclass
from decimal import Decimal
import logging

from django.db import transaction
from django.utils import timezone

from core_backend.exceptions import (
    InvalidAmountError,
    OrderCancelledError,
    OrderClosedError,
    OrderNotFoundError,
    OverpaymentRejectedError,
    POSValidationError,
)
from orders.models import Order
from orders.state_machine import (
    OrderStatus,
    can_record_payment,
    derive_payment_status,
    remaining_amount,
)
from payments.models import Payment
from payments.money import ZERO, has_money_precision, quantize, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentResult:
    payment: Payment
    order: Order
    remaining_amount: Decimal


class PaymentReconciliationService:
    """
    Applies incremental payments against an order.

    Split and partial payments are simply repeated calls. The order row is
    locked for the whole read-validate-write cycle so concurrent payments on
    the same order are serialized and can never over-pay it together.
    """

    @staticmethod
    def _validate_amount(amount) -> Decimal:
        try:
            value = to_decimal(amount)
        except ValueError:
            raise InvalidAmountError(amount)
        if value <= ZERO:
            raise InvalidAmountError(amount)
        if not has_money_precision(value):
            raise InvalidAmountError(
                amount, message=f"Payment amount {amount} has more than two decimal places"
            )
        return quantize(value)

    @staticmethod
    def _validate_method(method) -> str:
        if method not in Payment.PaymentMethod.values:
            raise POSValidationError(
                f"'{method}' is not a valid payment method. "
                f"Valid methods: {', '.join(Payment.PaymentMethod.values)}"
            )
        return method

    @staticmethod
    @transaction.atomic
    def record_payment(
        order_id,
        tenant_id,
        amount,
        method,
        transaction_ref=None,
        notes=None,
    ) -> PaymentResult:
        """
        Record one payment and update the order's paid amount and payment status.

        Checks run in this order: amount, method, order exists, tenant
        matches, order not cancelled, order not completed, amount within the
        remaining balance.

        Raises:
            InvalidAmountError: amount is not positive or has sub-cent precision
            POSValidationError: unknown payment method
            OrderNotFoundError
            TenantMismatchError: order belongs to another tenant
            OrderCancelledError
            OrderClosedError: order already completed
            OverpaymentRejectedError: amount exceeds the remaining balance
        """
        amount = PaymentReconciliationService._validate_amount(amount)
        method = PaymentReconciliationService._validate_method(method)

        order = Order.objects.get_owned(
            order_id, tenant_id, OrderNotFoundError(order_id), lock=True
        )

        if not can_record_payment(order.status):
            if order.status == OrderStatus.CANCELLED:
                raise OrderCancelledError(order.order_number)
            raise OrderClosedError(order.order_number)

        remaining = remaining_amount(order.paid_amount, order.total_amount)
        if amount > remaining:
            logger.warning(
                f"Order {order.order_number}: Rejected payment of {amount}, remaining balance {remaining}"
            )
            raise OverpaymentRejectedError(amount, remaining)

        payment = Payment.objects.create(
            tenant_id=order.tenant_id,
            order=order,
            amount=amount,
            method=method,
            transaction_ref=transaction_ref or None,
            notes=notes or None,
            paid_at=timezone.now(),
        )

        order.paid_amount = order.paid_amount + amount
        order.payment_status = derive_payment_status(order.paid_amount, order.total_amount)
        order.save(update_fields=["paid_amount", "payment_status", "updated_at"])

        remaining = remaining_amount(order.paid_amount, order.total_amount)
        logger.info(
            f"Order {order.order_number}: Recorded {method} payment of {amount}, "
            f"paid {order.paid_amount}/{order.total_amount} ({order.payment_status})"
        )
        return PaymentResult(payment=payment, order=order, remaining_amount=remaining)
