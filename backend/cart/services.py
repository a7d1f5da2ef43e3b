"""
Cart service layer.

This service handles:
- Adding catalog products to an in-memory cart (lookup + selection validation)
- Building a cart from a request payload
- Submitting a cart to order assembly
"""

from typing import Iterable, Optional
import logging

from cart.aggregator import CartAggregator, CartLine
from orders.services import OrderAssemblyService, OrderAssemblyResult
from products.services import CatalogService, SelectionValidator
from products.snapshots import ProductSnapshot, VariantSnapshot
from tenant.models import Tenant

logger = logging.getLogger(__name__)


class CartService:
    """Bridges the catalog, the cart aggregator and order assembly."""

    @staticmethod
    def create_cart(tenant_id) -> CartAggregator:
        """Empty cart using the tenant's effective tax and service charge rates."""
        tenant = Tenant.objects.get_active(tenant_id)
        return CartAggregator(
            tax_rate=tenant.get_effective_tax_rate(),
            service_charge_rate=tenant.get_effective_service_charge_rate(),
        )

    @staticmethod
    def add_product(
        cart: CartAggregator,
        tenant_id,
        product_id,
        variant_id=None,
        selections: Iterable[dict] = (),
        quantity: int = 1,
        note: str = "",
    ) -> CartLine:
        """
        Look up a product, validate the chosen options and add it to the cart.

        Price deltas are snapshotted from the catalog at this point; later
        catalog edits do not affect the cart line.

        Raises:
            ProductNotFoundError: unknown, inactive or other tenant's product
            OptionSelectionError / MissingSelectionError: invalid selections
            CartValidationError: bad quantity
        """
        product = CatalogService.get_product(tenant_id, product_id)
        variant = CatalogService.get_variant(product, variant_id)
        selected_groups = SelectionValidator(product).validate(selections)

        line = cart.add_item(
            ProductSnapshot.from_model(product),
            variant=VariantSnapshot.from_model(variant) if variant else None,
            selected_option_groups=selected_groups,
            quantity=quantity,
            note=note,
        )
        logger.debug(f"Cart line {line.id}: {product.name} x{line.quantity}")
        return line

    @staticmethod
    def build_cart(tenant_id, items: Iterable[dict]) -> CartAggregator:
        """
        Build a cart from payload items of the form
        {"product_id", "variant_id", "selections", "quantity", "note"}.
        """
        cart = CartService.create_cart(tenant_id)
        for item in items:
            CartService.add_product(
                cart,
                tenant_id,
                item["product_id"],
                variant_id=item.get("variant_id"),
                selections=item.get("selections") or (),
                quantity=item.get("quantity", 1),
                note=item.get("note") or "",
            )
        return cart

    @staticmethod
    def submit_cart(
        cart: CartAggregator,
        tenant_id,
        customer_name: Optional[str] = None,
        table_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> OrderAssemblyResult:
        """Assemble an order from the cart using the cart's rates, then clear it."""
        result = OrderAssemblyService.create_order(
            tenant_id,
            cart.to_order_lines(),
            tax_rate=cart.tax_rate,
            service_charge_rate=cart.service_charge_rate,
            customer_name=customer_name,
            table_number=table_number,
            notes=notes,
        )
        cart.clear()
        return result
