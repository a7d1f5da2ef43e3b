"""
Order Assembly Tests

Verifies that cart lines are priced once, persisted as frozen snapshots and
numbered per tenant.
"""
import pytest
from decimal import Decimal

from core_backend.exceptions import (
    EmptyOrderError,
    InactiveTenantError,
    LineValidationError,
    POSValidationError,
    TenantNotFoundError,
)
from orders.models import Order, OrderItem
from orders.pricing import OrderLine, SelectedOption, SelectedOptionGroup
from orders.services import OrderAssemblyService


@pytest.mark.django_db
class TestCreateOrder:
    """Test order creation from priced lines"""

    def test_burger_scenario_totals(self, tenant_a, burger_line):
        """
        CRITICAL: Verify the stored order matches the calculator breakdown

        Business Impact: Every receipt prints these stored amounts
        """
        result = OrderAssemblyService.create_order(tenant_a.id, [burger_line])
        order = Order.objects.get(pk=result.order.pk)

        assert order.subtotal == Decimal('120000.00')
        assert order.tax_amount == Decimal('12000.00')
        assert order.service_charge_amount == Decimal('6000.00')
        assert order.total_amount == Decimal('138000.00')
        assert order.tax_rate == Decimal('0.1000')
        assert order.service_charge_rate == Decimal('0.0500')
        assert result.pricing.total_amount == order.total_amount

    def test_initial_state(self, tenant_a, burger_line):
        order = OrderAssemblyService.create_order(tenant_a.id, [burger_line]).order

        assert order.tenant == tenant_a, "Order not assigned to correct tenant"
        assert order.status == Order.Status.DRAFT
        assert order.payment_status == Order.PaymentStatus.UNPAID
        assert order.paid_amount == Decimal('0')
        assert order.completed_at is None
        assert all(item.status == OrderItem.ItemStatus.PENDING for item in order.items.all())

    def test_items_snapshot_product_and_options(self, tenant_a, burger_line):
        order = OrderAssemblyService.create_order(tenant_a.id, [burger_line]).order

        item = order.items.get()
        assert item.product_id == 'burger'
        assert item.product_name == 'Burger'
        assert item.base_price == Decimal('100000.00')
        assert item.unit_price == Decimal('120000.00')
        assert item.item_subtotal == Decimal('120000.00')
        assert item.tenant == tenant_a

        options = list(item.selected_options_snapshot.all())
        assert [o.option_name for o in options] == ['Extra Cheese', 'Bacon']
        assert [o.position for o in options] == [0, 1]
        assert all(o.tenant_id == tenant_a.id for o in options)

    def test_nested_options_are_stored_flat_in_preorder(self, tenant_a):
        oat = SelectedOption(group_id='milk', option_id='oat', option_name='Oat Milk',
                             price_delta=Decimal('3000'))
        coffee = SelectedOption(
            group_id='drink', option_id='coffee', option_name='Coffee', price_delta=Decimal('5000'),
            child_groups=(SelectedOptionGroup(group_id='milk', selected_options=(oat,)),),
        )
        line = OrderLine(
            product_id='combo', product_name='Combo Meal', base_price=Decimal('50000'),
            selected_option_groups=(SelectedOptionGroup(group_id='drink', selected_options=(coffee,)),),
        )

        order = OrderAssemblyService.create_order(tenant_a.id, [line]).order
        item = order.items.get()

        assert item.unit_price == Decimal('58000.00')
        assert list(
            item.selected_options_snapshot.values_list('option_id', flat=True)
        ) == ['coffee', 'oat']

    def test_lines_keep_their_order(self, tenant_a, burger_line, simple_line):
        order = OrderAssemblyService.create_order(tenant_a.id, [simple_line, burger_line]).order
        assert list(order.items.values_list('product_name', flat=True)) == ['Water', 'Burger']

    def test_customer_fields(self, tenant_a, simple_line):
        order = OrderAssemblyService.create_order(
            tenant_a.id, [simple_line], customer_name='Ana', table_number='12', notes='Window seat'
        ).order
        assert order.customer_name == 'Ana'
        assert order.table_number == '12'
        assert order.notes == 'Window seat'

    def test_tenant_rates_are_used(self, tenant_b, simple_line):
        order = OrderAssemblyService.create_order(tenant_b.id, [simple_line]).order

        assert order.tax_amount == Decimal('4.00')
        assert order.service_charge_amount == Decimal('0.00')
        assert order.total_amount == Decimal('54.00')

    def test_rate_overrides(self, tenant_a, simple_line):
        order = OrderAssemblyService.create_order(
            tenant_a.id, [simple_line], tax_rate=Decimal('0.20'), service_charge_rate=Decimal('0')
        ).order
        assert order.tax_amount == Decimal('10.00')
        assert order.total_amount == Decimal('60.00')

    def test_zero_price_order(self, tenant_a):
        line = OrderLine(product_id='free', product_name='Free Refill', base_price=Decimal('0'))
        order = OrderAssemblyService.create_order(tenant_a.id, [line]).order
        assert order.total_amount == Decimal('0.00')
        assert order.payment_status == Order.PaymentStatus.UNPAID


@pytest.mark.django_db
class TestOrderNumbering:

    def test_sequential_numbers_per_tenant(self, tenant_a, tenant_b, simple_line):
        """
        CRITICAL: Order numbers are sequential and independent per tenant

        Business Impact: Two restaurants must both start at ORD-00001
        """
        first = OrderAssemblyService.create_order(tenant_a.id, [simple_line]).order
        second = OrderAssemblyService.create_order(tenant_a.id, [simple_line]).order
        other = OrderAssemblyService.create_order(tenant_b.id, [simple_line]).order

        assert first.order_number == 'ORD-00001'
        assert second.order_number == 'ORD-00002'
        assert other.order_number == 'ORD-00001'


@pytest.mark.django_db
class TestCreateOrderValidation:

    def test_empty_lines_rejected(self, tenant_a):
        with pytest.raises(EmptyOrderError):
            OrderAssemblyService.create_order(tenant_a.id, [])
        assert Order.objects.count() == 0

    def test_zero_quantity_rejected(self, tenant_a, simple_line):
        bad = OrderLine(product_id='water', product_name='Water', base_price=Decimal('50'), quantity=0)
        with pytest.raises(LineValidationError) as exc_info:
            OrderAssemblyService.create_order(tenant_a.id, [simple_line, bad])

        assert exc_info.value.index == 1
        assert Order.objects.count() == 0, "Nothing may be persisted on failure"

    def test_negative_base_price_rejected(self, tenant_a):
        bad = OrderLine(product_id='x', product_name='X', base_price=Decimal('-1'))
        with pytest.raises(LineValidationError):
            OrderAssemblyService.create_order(tenant_a.id, [bad])

    def test_missing_product_id_rejected(self, tenant_a):
        bad = OrderLine(product_id=None, product_name='X', base_price=Decimal('1'))
        with pytest.raises(LineValidationError):
            OrderAssemblyService.create_order(tenant_a.id, [bad])

    def test_sub_cent_base_price_rejected(self, tenant_a):
        """
        CRITICAL: Line prices must be whole cents

        Business Impact: Two 0.333 lines would store item subtotals of 0.33 each
        but an order subtotal of 0.67, and the receipt would not add up
        """
        lines = [
            OrderLine(product_id='a', product_name='A', base_price=Decimal('0.333')),
            OrderLine(product_id='b', product_name='B', base_price=Decimal('0.333')),
        ]
        with pytest.raises(LineValidationError) as exc_info:
            OrderAssemblyService.create_order(tenant_a.id, lines)

        assert exc_info.value.index == 0
        assert Order.objects.count() == 0

    def test_sub_cent_variant_delta_rejected(self, tenant_a):
        bad = OrderLine(
            product_id='x', product_name='X', base_price=Decimal('10'),
            variant_id='v', variant_name='Big', variant_price_delta=Decimal('1.005'),
        )
        with pytest.raises(LineValidationError):
            OrderAssemblyService.create_order(tenant_a.id, [bad])

    def test_sub_cent_nested_option_delta_rejected(self, tenant_a):
        nested = SelectedOption(
            group_id='g2', group_name='Milk', option_id='o2', option_name='Oat', price_delta=Decimal('0.125'),
        )
        top = SelectedOption(
            group_id='g1', group_name='Drink', option_id='o1', option_name='Coffee',
            price_delta=Decimal('5.00'),
            child_groups=(SelectedOptionGroup(group_id='g2', group_name='Milk', selected_options=(nested,)),),
        )
        bad = OrderLine(product_id='x', product_name='X', base_price=Decimal('10'), selected_options=(top,))

        with pytest.raises(LineValidationError) as exc_info:
            OrderAssemblyService.create_order(tenant_a.id, [bad])
        assert 'Oat' in exc_info.value.message

    def test_order_subtotal_equals_sum_of_item_subtotals(self, tenant_a, burger_line, simple_line):
        order = OrderAssemblyService.create_order(tenant_a.id, [burger_line, simple_line]).order
        order = Order.objects.get(pk=order.pk)

        assert order.subtotal == sum(item.item_subtotal for item in order.items.all())

    @pytest.mark.parametrize("rate", [Decimal('-0.01'), Decimal('1.5'), Decimal('0.12345'), 'abc'])
    def test_invalid_rate_override(self, tenant_a, simple_line, rate):
        with pytest.raises(POSValidationError):
            OrderAssemblyService.create_order(tenant_a.id, [simple_line], tax_rate=rate)

    def test_unknown_tenant(self, simple_line):
        with pytest.raises(TenantNotFoundError):
            OrderAssemblyService.create_order('00000000-0000-0000-0000-000000000000', [simple_line])

    def test_inactive_tenant(self, inactive_tenant, simple_line):
        with pytest.raises(InactiveTenantError):
            OrderAssemblyService.create_order(inactive_tenant.id, [simple_line])
