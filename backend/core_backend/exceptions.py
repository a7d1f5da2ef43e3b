"""
Domain exceptions for the POS order core and the DRF handler that renders them.

Services raise these exceptions and never catch them; views let them bubble
up to `pos_exception_handler`, which maps each family to an HTTP status.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class POSServiceError(Exception):
    """Base exception for order construction and settlement errors."""

    code = "pos_error"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message=None):
        if message is None:
            message = "Point of sale operation failed"
        self.message = message
        super().__init__(message)

    def to_dict(self):
        return {"error": self.message, "code": self.code}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class POSValidationError(POSServiceError):
    """Raised when caller input is malformed or violates a business rule."""

    code = "validation_error"


class EmptyOrderError(POSValidationError):
    """Raised when an order is assembled or confirmed without items."""

    code = "empty_order"

    def __init__(self, message=None):
        super().__init__(message or "Order must contain at least one item")


class LineValidationError(POSValidationError):
    """Raised when a single order line is malformed."""

    code = "invalid_line"

    def __init__(self, index, reason, message=None):
        self.index = index
        self.reason = reason
        if message is None:
            message = f"Line {index}: {reason}"
        super().__init__(message)

    def to_dict(self):
        data = super().to_dict()
        data["line"] = self.index
        return data


class InvalidAmountError(POSValidationError):
    """Raised when a payment amount is not a positive two-decimal value."""

    code = "invalid_amount"

    def __init__(self, amount, message=None):
        self.amount = amount
        if message is None:
            message = f"Payment amount must be greater than zero, got {amount}"
        super().__init__(message)


class MissingSelectionError(POSValidationError):
    """Raised when a required option group has no selection."""

    code = "missing_selection"

    def __init__(self, group_name, message=None):
        self.group_name = group_name
        if message is None:
            message = f"A selection is required for '{group_name}'"
        super().__init__(message)


class OptionSelectionError(POSValidationError):
    """Raised when a selection does not fit the option group's rules."""

    code = "invalid_selection"


class PaymentIncompleteError(POSValidationError):
    """Raised when completing an order that is not fully paid."""

    code = "payment_incomplete"

    def __init__(self, order_number, payment_status, message=None):
        self.order_number = order_number
        self.payment_status = payment_status
        if message is None:
            message = (
                f"Order {order_number} cannot be completed while payment is {payment_status}"
            )
        super().__init__(message)


class CartValidationError(POSValidationError):
    """Raised when a cart mutation receives invalid input."""

    code = "invalid_cart"


# ---------------------------------------------------------------------------
# Lookup and tenancy
# ---------------------------------------------------------------------------

class NotFoundError(POSServiceError):
    """Base class for missing records."""

    code = "not_found"
    http_status = status.HTTP_404_NOT_FOUND


class TenantNotFoundError(NotFoundError):
    code = "tenant_not_found"

    def __init__(self, tenant_id, message=None):
        self.tenant_id = tenant_id
        super().__init__(message or f"Tenant '{tenant_id}' not found")


class OrderNotFoundError(NotFoundError):
    code = "order_not_found"

    def __init__(self, order_id, message=None):
        self.order_id = order_id
        super().__init__(message or f"Order '{order_id}' not found")


class ProductNotFoundError(NotFoundError):
    code = "product_not_found"

    def __init__(self, product_id, message=None):
        self.product_id = product_id
        super().__init__(message or f"Product '{product_id}' not found")


class CartLineNotFoundError(NotFoundError):
    code = "cart_line_not_found"

    def __init__(self, line_id, message=None):
        self.line_id = line_id
        super().__init__(message or f"Cart line '{line_id}' not found")


class TenantMismatchError(POSServiceError):
    """Raised when a record is accessed with another tenant's id."""

    code = "tenant_mismatch"
    http_status = status.HTTP_403_FORBIDDEN

    def __init__(self, resource="Order", message=None):
        self.resource = resource
        super().__init__(message or f"{resource} does not belong to this tenant")


class InactiveTenantError(POSServiceError):
    code = "tenant_inactive"
    http_status = status.HTTP_403_FORBIDDEN

    def __init__(self, tenant_id, message=None):
        self.tenant_id = tenant_id
        super().__init__(message or f"Tenant '{tenant_id}' is not active")


# ---------------------------------------------------------------------------
# Order state
# ---------------------------------------------------------------------------

class OrderStateError(POSServiceError):
    """Raised when an operation is not allowed in the order's current status."""

    code = "invalid_order_state"
    http_status = status.HTTP_409_CONFLICT


class InvalidTransitionError(OrderStateError):
    code = "invalid_transition"

    def __init__(self, from_status, to_status, message=None):
        self.from_status = from_status
        self.to_status = to_status
        if message is None:
            message = f"Cannot transition order from {from_status} to {to_status}"
        super().__init__(message)

    def to_dict(self):
        data = super().to_dict()
        data.update({"from_status": self.from_status, "to_status": self.to_status})
        return data


class OrderCancelledError(OrderStateError):
    code = "order_cancelled"

    def __init__(self, order_number=None, message=None):
        self.order_number = order_number
        if message is None:
            label = f"Order {order_number}" if order_number else "Order"
            message = f"{label} is cancelled"
        super().__init__(message)


class OrderClosedError(OrderStateError):
    code = "order_closed"

    def __init__(self, order_number=None, message=None):
        self.order_number = order_number
        if message is None:
            label = f"Order {order_number}" if order_number else "Order"
            message = f"{label} is already completed"
        super().__init__(message)


class NoPendingItemsError(OrderStateError):
    code = "no_pending_items"

    def __init__(self, message=None):
        super().__init__(message or "Order has no pending items to send to the kitchen")


class OverpaymentRejectedError(POSServiceError):
    """Raised when a payment exceeds the order's remaining balance."""

    code = "overpayment_rejected"
    http_status = status.HTTP_409_CONFLICT

    def __init__(self, attempted_amount, remaining_amount, message=None):
        self.attempted_amount = attempted_amount
        self.remaining_amount = remaining_amount
        if message is None:
            message = (
                f"Payment of {attempted_amount} exceeds remaining balance of {remaining_amount}"
            )
        super().__init__(message)

    def to_dict(self):
        data = super().to_dict()
        data.update({
            "attempted_amount": str(self.attempted_amount),
            "remaining_amount": str(self.remaining_amount),
        })
        return data


def pos_exception_handler(exc, context):
    """
    Render POS domain errors as JSON responses; defer everything else to DRF.
    """
    if isinstance(exc, POSServiceError):
        request = context.get("request")
        if request is not None:
            logger.warning(
                f"POS API error: {exc.__class__.__name__}: {exc.message}",
                extra={
                    "status_code": exc.http_status,
                    "path": request.path,
                    "method": request.method,
                },
            )
        return Response(exc.to_dict(), status=exc.http_status)

    return exception_handler(exc, context)
