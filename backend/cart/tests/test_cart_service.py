"""
Cart Service Tests

Catalog-backed cart building: product lookup, selection validation, price
snapshots and submission to order assembly.
"""
import pytest
from decimal import Decimal

from cart.services import CartService
from core_backend.exceptions import (
    CartValidationError,
    InactiveTenantError,
    MissingSelectionError,
    OptionSelectionError,
    ProductNotFoundError,
)
from orders.models import Order


@pytest.mark.django_db
class TestAddProduct:

    def test_add_with_options(self, tenant_a, burger_tenant_a, burger_options):
        cart = CartService.create_cart(tenant_a.id)
        addons = burger_tenant_a.option_groups.get(name='Add-ons')

        line = CartService.add_product(
            cart, tenant_a.id, burger_tenant_a.id,
            selections=[{'group_id': addons.id, 'option_ids': [
                burger_options['Extra Cheese'].id, burger_options['Bacon'].id,
            ]}],
        )

        assert line.line_total == Decimal('120000')
        assert cart.total == Decimal('138000.00')

    def test_add_with_variant(self, tenant_a, pizza_tenant_a, pizza_catalog):
        size, sizes = pizza_catalog['Size']
        family = pizza_tenant_a.variants.get(name='Family')
        cart = CartService.create_cart(tenant_a.id)

        line = CartService.add_product(
            cart, tenant_a.id, pizza_tenant_a.id, variant_id=family.id,
            selections=[{'group_id': size.id, 'option_ids': [sizes['Large'].id]}],
        )

        assert line.variant.name == 'Family'
        assert line.line_total == Decimal('130000')

    def test_nested_selection(self, tenant_a, combo_tenant_a):
        drink = combo_tenant_a.option_groups.get(name='Drink')
        coffee = drink.options.get(name='Coffee')
        milk = coffee.child_groups.get()
        oat = milk.options.get()
        cart = CartService.create_cart(tenant_a.id)

        line = CartService.add_product(
            cart, tenant_a.id, combo_tenant_a.id,
            selections=[{'group_id': drink.id, 'options': [
                {'option_id': coffee.id, 'child_groups': [
                    {'group_id': milk.id, 'option_ids': [oat.id]},
                ]},
            ]}],
        )

        assert line.line_total == Decimal('58000')

    def test_catalog_price_is_snapshotted(self, tenant_a, burger_tenant_a):
        """
        CRITICAL: Catalog edits after adding must not reprice the cart

        Business Impact: The customer pays what was shown when the item was added
        """
        cart = CartService.create_cart(tenant_a.id)
        line = CartService.add_product(cart, tenant_a.id, burger_tenant_a.id)

        burger_tenant_a.base_price = Decimal('999999')
        burger_tenant_a.save()

        assert line.line_total == Decimal('100000')
        result = CartService.submit_cart(cart, tenant_a.id)
        assert result.order.subtotal == Decimal('100000.00')

    def test_missing_required_group(self, tenant_a, pizza_tenant_a):
        cart = CartService.create_cart(tenant_a.id)
        with pytest.raises(MissingSelectionError):
            CartService.add_product(cart, tenant_a.id, pizza_tenant_a.id)
        assert len(cart) == 0

    def test_inactive_product(self, tenant_a, burger_tenant_a):
        burger_tenant_a.is_active = False
        burger_tenant_a.save()
        cart = CartService.create_cart(tenant_a.id)

        with pytest.raises(ProductNotFoundError):
            CartService.add_product(cart, tenant_a.id, burger_tenant_a.id)

    def test_other_tenant_product(self, tenant_a, product_tenant_b):
        cart = CartService.create_cart(tenant_a.id)
        with pytest.raises(ProductNotFoundError):
            CartService.add_product(cart, tenant_a.id, product_tenant_b.id)

    def test_unknown_variant(self, tenant_a, burger_tenant_a):
        cart = CartService.create_cart(tenant_a.id)
        with pytest.raises(OptionSelectionError):
            CartService.add_product(
                cart, tenant_a.id, burger_tenant_a.id, variant_id='8d5c3f9e-1111-4f4f-9999-000000000000'
            )

    def test_invalid_quantity(self, tenant_a, burger_tenant_a):
        cart = CartService.create_cart(tenant_a.id)
        with pytest.raises(CartValidationError):
            CartService.add_product(cart, tenant_a.id, burger_tenant_a.id, quantity=0)

    def test_inactive_tenant_cannot_open_cart(self, inactive_tenant):
        with pytest.raises(InactiveTenantError):
            CartService.create_cart(inactive_tenant.id)


@pytest.mark.django_db
class TestSubmitCart:

    def test_submit_creates_order_and_clears_cart(self, tenant_a, burger_tenant_a):
        cart = CartService.create_cart(tenant_a.id)
        CartService.add_product(cart, tenant_a.id, burger_tenant_a.id, quantity=2)

        result = CartService.submit_cart(cart, tenant_a.id, customer_name='Ana', table_number='4')

        assert len(cart) == 0
        assert result.order.status == Order.Status.DRAFT
        assert result.order.customer_name == 'Ana'
        assert result.order.total_amount == Decimal('230000.00')
        assert result.order.items.get().quantity == 2

    def test_submit_uses_tenant_rates(self, tenant_b, tenant_a, product_tenant_b):
        cart = CartService.create_cart(tenant_b.id)
        CartService.add_product(cart, tenant_b.id, product_tenant_b.id)

        result = CartService.submit_cart(cart, tenant_b.id)

        assert result.order.tax_amount == Decimal('2000.00')
        assert result.order.service_charge_amount == Decimal('0.00')

    def test_build_cart_from_payload(self, tenant_a, burger_tenant_a):
        cart = CartService.build_cart(tenant_a.id, [
            {'product_id': burger_tenant_a.id, 'quantity': 1, 'note': 'no onions'},
            {'product_id': burger_tenant_a.id, 'quantity': 2},
        ])

        assert len(cart) == 1
        assert cart.item_count == 3
