"""
Core backend base components.

This package provides foundational classes and utilities that should be used
throughout the Django application for consistency and maintainability.
"""

from .mixins import TenantContextMixin, PaginationParamsMixin
from .filters import BaseFilterSet, FlexibleDateTimeFilter, normalize_datetime_value

__all__ = [
    # Mixins
    'TenantContextMixin',
    'PaginationParamsMixin',

    # Filters
    'BaseFilterSet',
    'FlexibleDateTimeFilter',
    'normalize_datetime_value',
]
