"""
Orders services package - modular service layer for order management.

- OrderAssemblyService: Builds a priced draft order from cart lines
- OrderLifecycleService: Confirm, prepare, ready, complete and cancel
- OrderQueryService: Open orders and order history listings
"""

# Order construction
from .assembly_service import OrderAssemblyService, OrderAssemblyResult

# Status transitions
from .lifecycle_service import OrderLifecycleService

# Listings
from .query_service import OrderQueryService, OrderPage, Pagination

__all__ = [
    # Assembly
    'OrderAssemblyService',
    'OrderAssemblyResult',
    # Lifecycle
    'OrderLifecycleService',
    # Queries
    'OrderQueryService',
    'OrderPage',
    'Pagination',
]
