from dataclasses import dataclass
from typing import List, Optional
import logging

from django.conf import settings
from django.db.models import Prefetch

from core_backend.exceptions import POSValidationError
from orders.filters import OrderHistoryFilter
from orders.models import Order, OrderItem
from orders.state_machine import CLOSED_STATUSES
from tenant.models import Tenant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pagination:
    total: int
    limit: int
    offset: int
    has_more: bool

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
            "has_more": self.has_more,
        }


@dataclass(frozen=True)
class OrderPage:
    orders: List[Order]
    pagination: Pagination


class OrderQueryService:
    """Read side for the order screens: open orders and order history."""

    @staticmethod
    def _base_queryset(tenant):
        return Order.objects.for_tenant(tenant).prefetch_related(
            Prefetch(
                "items",
                queryset=OrderItem.objects.prefetch_related("selected_options_snapshot"),
            )
        )

    @staticmethod
    def _validate_window(limit, offset):
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise POSValidationError(f"limit must be a positive integer, got {limit}")
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
            raise POSValidationError(f"offset must be zero or a positive integer, got {offset}")

    @staticmethod
    def _paginate(queryset, limit, offset) -> OrderPage:
        total = queryset.count()
        orders = list(queryset[offset:offset + limit])
        return OrderPage(
            orders=orders,
            pagination=Pagination(
                total=total,
                limit=limit,
                offset=offset,
                has_more=offset + len(orders) < total,
            ),
        )

    @staticmethod
    def list_open_orders(tenant_id, limit: Optional[int] = None, offset: int = 0) -> OrderPage:
        """Orders still in draft, confirmed, preparing or ready, newest first."""
        if limit is None:
            limit = settings.POS_OPEN_ORDERS_PAGE_SIZE
        OrderQueryService._validate_window(limit, offset)
        tenant = Tenant.objects.get_active(tenant_id)

        queryset = OrderQueryService._base_queryset(tenant).open().order_by("-created_at", "-order_number")
        return OrderQueryService._paginate(queryset, limit, offset)

    @staticmethod
    def list_order_history(
        tenant_id,
        limit: Optional[int] = None,
        offset: int = 0,
        date_from=None,
        date_to=None,
        status=None,
        payment_status=None,
        filters=None,
    ) -> OrderPage:
        """
        Completed and cancelled orders, newest first.

        `date_from` / `date_to` bound the creation time; date-only values
        cover the whole day. `status` narrows to completed or cancelled.
        `filters` takes raw OrderHistoryFilter parameters (e.g. request query
        params); the keyword arguments take precedence over it.

        Raises:
            POSValidationError: bad window, a status that is not closed, or
                filter values that do not parse
        """
        if limit is None:
            limit = settings.POS_ORDER_HISTORY_PAGE_SIZE
        OrderQueryService._validate_window(limit, offset)

        params = dict((filters or {}).items())
        for key, value in (
            ("date_from", date_from),
            ("date_to", date_to),
            ("status", status),
            ("payment_status", payment_status),
        ):
            if value not in (None, ""):
                params[key] = value

        if params.get("status") and params["status"] not in CLOSED_STATUSES:
            raise POSValidationError(
                f"status must be one of {', '.join(CLOSED_STATUSES)}, got '{params['status']}'"
            )

        tenant = Tenant.objects.get_active(tenant_id)

        filterset = OrderHistoryFilter(
            params, queryset=OrderQueryService._base_queryset(tenant).closed()
        )
        if not filterset.is_valid():
            errors = "; ".join(
                f"{field}: {' '.join(messages)}" for field, messages in filterset.errors.items()
            )
            raise POSValidationError(f"Invalid history filter: {errors}")

        queryset = filterset.qs.order_by("-created_at", "-order_number")
        return OrderQueryService._paginate(queryset, limit, offset)
