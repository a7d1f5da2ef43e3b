"""
Order lifecycle state machine.

Single source of truth for which status transitions are legal and for the
payment sub-state derived from paid vs. total amounts. Storage independent:
every function works on plain status values and amounts.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from core_backend.exceptions import InvalidTransitionError
from payments.money import ZERO, to_decimal


class OrderStatus(models.TextChoices):
    DRAFT = "draft", _("Draft")  # Assembled, not yet sent anywhere
    CONFIRMED = "confirmed", _("Confirmed")  # Accepted, may go to the kitchen
    PREPARING = "preparing", _("Preparing")
    READY = "ready", _("Ready")
    COMPLETED = "completed", _("Completed")  # Paid and handed over
    CANCELLED = "cancelled", _("Cancelled")


class PaymentStatus(models.TextChoices):
    UNPAID = "unpaid", _("Unpaid")
    PARTIAL = "partial", _("Partially Paid")
    PAID = "paid", _("Paid")


TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

OPEN_STATUSES = (
    OrderStatus.DRAFT,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
)

CLOSED_STATUSES = (OrderStatus.COMPLETED, OrderStatus.CANCELLED)

# Valid status transitions; terminal statuses have no outgoing edges
VALID_STATUS_TRANSITIONS = {
    OrderStatus.DRAFT: [
        OrderStatus.CONFIRMED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.CONFIRMED: [
        OrderStatus.PREPARING,
        OrderStatus.READY,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.PREPARING: [
        OrderStatus.READY,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.READY: [
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.COMPLETED: [],
    OrderStatus.CANCELLED: [],
}


def allowed_next_statuses(status):
    return list(VALID_STATUS_TRANSITIONS.get(status, []))


def is_terminal(status) -> bool:
    return status in TERMINAL_STATUSES


def is_open(status) -> bool:
    return status in OPEN_STATUSES


def can_transition(from_status, to_status) -> bool:
    """Transition to the current status is a no-op and always allowed."""
    if from_status == to_status:
        return True
    return to_status in VALID_STATUS_TRANSITIONS.get(from_status, [])


def assert_transition(from_status, to_status):
    """
    Raises:
        InvalidTransitionError: naming both statuses when the edge is illegal
    """
    if to_status not in OrderStatus.values:
        raise InvalidTransitionError(
            from_status, to_status,
            message=f"'{to_status}' is not a valid order status",
        )
    if not can_transition(from_status, to_status):
        raise InvalidTransitionError(from_status, to_status)


def derive_payment_status(paid_amount, total_amount) -> str:
    """
    paid when paid == total, partial when 0 < paid < total, unpaid otherwise.

    A zero-total order is therefore reported as paid.
    """
    paid = to_decimal(paid_amount)
    total = to_decimal(total_amount)
    if paid == total:
        return PaymentStatus.PAID
    if ZERO < paid < total:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


def remaining_amount(paid_amount, total_amount) -> Decimal:
    return max(to_decimal(total_amount) - to_decimal(paid_amount), ZERO)


def can_confirm(status) -> bool:
    return status == OrderStatus.DRAFT


def can_send_to_kitchen(status) -> bool:
    return status == OrderStatus.CONFIRMED


def can_complete(status, payment_status) -> bool:
    return payment_status == PaymentStatus.PAID and status in (
        OrderStatus.PREPARING,
        OrderStatus.READY,
    )


def can_record_payment(status) -> bool:
    return status not in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


def can_cancel(status) -> bool:
    return not is_terminal(status)
