from django.db import transaction
from django.utils import timezone
import logging

from core_backend.exceptions import (
    EmptyOrderError,
    InvalidTransitionError,
    OrderNotFoundError,
    PaymentIncompleteError,
)
from orders.models import Order
from orders.state_machine import (
    OrderStatus,
    PaymentStatus,
    assert_transition,
    can_complete,
)
from payments.money import ZERO, format_money
from tenant.models import Tenant

logger = logging.getLogger(__name__)


class OrderLifecycleService:
    """
    Status transitions after assembly: confirm, prepare, ready, complete,
    cancel. Every transition is checked against the state machine and runs
    with the order row locked.
    """

    @staticmethod
    def get_order_for_update(order_id, tenant_id) -> Order:
        """
        Load an order of an active tenant with its row locked.

        Raises:
            TenantNotFoundError / InactiveTenantError
            OrderNotFoundError
            TenantMismatchError: order belongs to another tenant
        """
        Tenant.objects.get_active(tenant_id)
        return Order.objects.get_owned(
            order_id, tenant_id, OrderNotFoundError(order_id), lock=True
        )

    @staticmethod
    def _apply_status(order: Order, new_status, extra_fields=()) -> Order:
        old_status = order.status
        assert_transition(old_status, new_status)
        if old_status == new_status:
            return order

        order.status = new_status
        order.save(update_fields=["status", "updated_at", *extra_fields])
        logger.info(
            f"Order {order.order_number}: Status transition {old_status} -> {new_status}"
        )
        return order

    @staticmethod
    @transaction.atomic
    def confirm_order(order_id, tenant_id) -> Order:
        """draft -> confirmed. The order must have at least one item."""
        order = OrderLifecycleService.get_order_for_update(order_id, tenant_id)
        if order.status == OrderStatus.DRAFT and not order.items.exists():
            raise EmptyOrderError("Cannot confirm an order without items")
        return OrderLifecycleService._apply_status(order, OrderStatus.CONFIRMED)

    @staticmethod
    @transaction.atomic
    def start_preparing(order_id, tenant_id) -> Order:
        order = OrderLifecycleService.get_order_for_update(order_id, tenant_id)
        return OrderLifecycleService._apply_status(order, OrderStatus.PREPARING)

    @staticmethod
    @transaction.atomic
    def mark_ready(order_id, tenant_id) -> Order:
        order = OrderLifecycleService.get_order_for_update(order_id, tenant_id)
        return OrderLifecycleService._apply_status(order, OrderStatus.READY)

    @staticmethod
    @transaction.atomic
    def complete_order(order_id, tenant_id) -> Order:
        """
        Complete a fully paid order that is preparing or ready.

        Completing an already completed order is a no-op. An order still in
        `preparing` passes through `ready` inside the same transaction.

        Raises:
            InvalidTransitionError: status is not preparing/ready
            PaymentIncompleteError: payment status is not paid
        """
        order = OrderLifecycleService.get_order_for_update(order_id, tenant_id)
        if order.status == OrderStatus.COMPLETED:
            return order

        payment_status = order.derived_payment_status
        if not can_complete(order.status, payment_status):
            if order.status not in (OrderStatus.PREPARING, OrderStatus.READY):
                raise InvalidTransitionError(order.status, OrderStatus.COMPLETED)
            raise PaymentIncompleteError(order.order_number, payment_status)

        if order.status == OrderStatus.PREPARING:
            OrderLifecycleService._apply_status(order, OrderStatus.READY)

        order.completed_at = timezone.now()
        order.payment_status = PaymentStatus.PAID
        return OrderLifecycleService._apply_status(
            order, OrderStatus.COMPLETED, extra_fields=("completed_at", "payment_status")
        )

    @staticmethod
    @transaction.atomic
    def cancel_order(order_id, tenant_id, reason=None) -> Order:
        """
        Cancel any non-terminal order.

        The reason is appended to the order notes. When money was already
        taken, a refund warning is appended as well; refunds themselves are
        handled outside this service.
        """
        order = OrderLifecycleService.get_order_for_update(order_id, tenant_id)
        if order.status == OrderStatus.CANCELLED:
            return order
        assert_transition(order.status, OrderStatus.CANCELLED)

        if order.paid_amount > ZERO:
            order.append_note(
                f"[WARNING] Order has payments totaling {format_money(order.paid_amount)}. "
                f"Refund may be required."
            )
            logger.warning(
                f"Order {order.order_number} cancelled with {order.paid_amount} already paid"
            )
        if reason:
            order.append_note(f"[CANCELLED] {reason}")

        return OrderLifecycleService._apply_status(
            order, OrderStatus.CANCELLED, extra_fields=("notes",)
        )

    @staticmethod
    def transition_order(order_id, tenant_id, new_status, reason=None) -> Order:
        """Dispatch a requested status to the matching lifecycle operation."""
        handlers = {
            OrderStatus.CONFIRMED: OrderLifecycleService.confirm_order,
            OrderStatus.PREPARING: OrderLifecycleService.start_preparing,
            OrderStatus.READY: OrderLifecycleService.mark_ready,
            OrderStatus.COMPLETED: OrderLifecycleService.complete_order,
        }
        if new_status == OrderStatus.CANCELLED:
            return OrderLifecycleService.cancel_order(order_id, tenant_id, reason=reason)

        handler = handlers.get(new_status)
        if handler is None:
            with transaction.atomic():
                order = OrderLifecycleService.get_order_for_update(order_id, tenant_id)
                # Surfaces InvalidTransitionError for draft or unknown targets
                return OrderLifecycleService._apply_status(order, new_status)
        return handler(order_id, tenant_id)
