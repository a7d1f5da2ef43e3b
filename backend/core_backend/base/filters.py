import django_filters
from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_datetime, parse_date
from datetime import date, datetime, time
import logging

logger = logging.getLogger(__name__)


def normalize_datetime_value(value, *, is_end=False):
    """
    Normalize a date or datetime (or their string forms) to a timezone-aware datetime.

    Args:
        value: date string, datetime string, date object or datetime object
        is_end: If True and value is date-only, returns end of day (23:59:59.999999)
                If False, returns start of day (00:00:00)

    Examples:
        normalize_datetime_value("2025-11-11", is_end=False)  # 2025-11-11 00:00:00
        normalize_datetime_value("2025-11-11", is_end=True)   # 2025-11-11 23:59:59.999999
        normalize_datetime_value("2025-11-11T10:30:00Z")      # 2025-11-11 10:30:00 (unchanged)
    """
    if not value:
        return value

    if isinstance(value, datetime):
        if timezone.is_naive(value):
            return timezone.make_aware(value)
        return value

    if isinstance(value, date):
        return timezone.make_aware(datetime.combine(value, time.max if is_end else time.min))

    if isinstance(value, str):
        dt = parse_datetime(value)
        if dt:
            if timezone.is_naive(dt):
                return timezone.make_aware(dt)
            return dt

        date_obj = parse_date(value)
        if date_obj:
            return timezone.make_aware(
                datetime.combine(date_obj, time.max if is_end else time.min)
            )

    # Return as-is if we can't parse it
    return value


class FlexibleDateTimeFilter(django_filters.DateTimeFilter):
    """
    A DateTimeFilter that treats date-only input as a whole day.

    - For 'lte'/'lt' lookups: Uses end of day (23:59:59.999999)
    - For everything else: Uses start of day
    """

    def filter(self, qs, value):
        # A midnight datetime was most likely parsed from a date-only string
        if isinstance(value, datetime) and value.time() == time(0, 0, 0):
            if self.lookup_expr in ['lte', 'lt']:
                value = normalize_datetime_value(value.date(), is_end=True)
                logger.debug(f"FlexibleDateTimeFilter: Adjusted {self.field_name}__{self.lookup_expr} to end of day: {value}")

        return super().filter(qs, value)


class BaseFilterSet(django_filters.FilterSet):
    """
    Base filter set with common filtering patterns.

    Automatically uses FlexibleDateTimeFilter for all DateTimeField filters,
    allowing date-only inputs like "2025-11-11" to work intuitively as full-day ranges.
    """

    created_after = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='gte')
    created_before = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='lte')

    @classmethod
    def filter_for_field(cls, field, field_name, lookup_expr='exact'):
        if isinstance(field, models.DateTimeField):
            return FlexibleDateTimeFilter(field_name=field_name, lookup_expr=lookup_expr)
        return super().filter_for_field(field, field_name, lookup_expr)

    class Meta:
        abstract = True
