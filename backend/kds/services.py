from django.db import transaction
import logging

from core_backend.exceptions import (
    NoPendingItemsError,
    OrderCancelledError,
    OrderNotFoundError,
    OrderStateError,
    POSValidationError,
)
from kds.models import KitchenTicket, KitchenTicketPriority, KitchenTicketStatus
from orders.models import Order, OrderItem
from orders.state_machine import OrderStatus, can_send_to_kitchen

logger = logging.getLogger(__name__)

KITCHEN_ELIGIBLE_ITEM_STATUSES = (
    OrderItem.ItemStatus.PENDING,
    OrderItem.ItemStatus.PREPARING,
)


class KitchenTicketService:
    """Issues kitchen tickets for confirmed orders."""

    @staticmethod
    def serialize_item(item: OrderItem) -> dict:
        """Kitchen-facing snapshot of one order item."""
        return {
            "order_item_id": str(item.pk),
            "product_id": item.product_id,
            "product_name": item.product_name,
            "variant_name": item.variant_name,
            "quantity": item.quantity,
            "status": item.status,
            "notes": item.notes,
            "options": [
                {
                    "group_name": option.group_name,
                    "option_name": option.option_name,
                }
                for option in item.selected_options_snapshot.all()
            ],
        }

    @staticmethod
    @transaction.atomic
    def issue_ticket(order_id, tenant_id, priority=KitchenTicketPriority.NORMAL) -> KitchenTicket:
        """
        Create a ticket from the order's pending and preparing items.

        The order and its items are left untouched.

        Raises:
            POSValidationError: unknown priority
            OrderNotFoundError
            TenantMismatchError: order belongs to another tenant
            OrderCancelledError
            OrderStateError: order is not confirmed
            NoPendingItemsError: order has no items, or none pending/preparing
        """
        if priority not in KitchenTicketPriority.values:
            raise POSValidationError(
                f"'{priority}' is not a valid priority. "
                f"Valid priorities: {', '.join(KitchenTicketPriority.values)}"
            )

        order = Order.objects.get_owned(
            order_id, tenant_id, OrderNotFoundError(order_id), lock=True
        )

        if order.status == OrderStatus.CANCELLED:
            raise OrderCancelledError(order.order_number)
        if not can_send_to_kitchen(order.status):
            raise OrderStateError(
                f"Order {order.order_number} must be confirmed before it is sent to the kitchen "
                f"(current status: {order.status})"
            )

        items = list(order.items.prefetch_related("selected_options_snapshot"))
        if not items:
            raise NoPendingItemsError(f"Order {order.order_number} has no items")

        eligible = [item for item in items if item.status in KITCHEN_ELIGIBLE_ITEM_STATUSES]
        if not eligible:
            raise NoPendingItemsError()

        ticket = KitchenTicket.objects.create(
            tenant_id=order.tenant_id,
            order=order,
            ticket_number=KitchenTicket.objects.generate_ticket_number(order.tenant_id),
            status=KitchenTicketStatus.PENDING,
            priority=priority,
            table_number=order.table_number,
            items=[KitchenTicketService.serialize_item(item) for item in eligible],
        )

        logger.info(
            f"Kitchen ticket {ticket.ticket_number} issued for order {order.order_number} "
            f"({len(eligible)} items, priority {priority})"
        )
        return ticket
