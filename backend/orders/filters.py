import django_filters

from core_backend.base.filters import BaseFilterSet, FlexibleDateTimeFilter
from orders.models import Order
from orders.state_machine import CLOSED_STATUSES, PaymentStatus


class OrderHistoryFilter(BaseFilterSet):
    """
    Filters applied to the order history listing.

    - date_from / date_to (or created_after / created_before): creation date
      range; date-only values cover whole days
    - completed_at__gte / completed_at__lte: completion date range
    - status: completed or cancelled
    - payment_status: unpaid, partial or paid
    """

    date_from = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='gte')
    date_to = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='lte')
    status = django_filters.ChoiceFilter(
        choices=[(status.value, status.label) for status in CLOSED_STATUSES]
    )
    payment_status = django_filters.ChoiceFilter(choices=PaymentStatus.choices)

    class Meta:
        model = Order
        fields = {
            'completed_at': ['gte', 'lte'],
        }
