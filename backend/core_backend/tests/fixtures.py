"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like tenants, catalog products and orders at each lifecycle stage.
"""
import pytest
from decimal import Decimal

from orders.pricing import OrderLine, SelectedOption, SelectedOptionGroup
from orders.services import OrderAssemblyService, OrderLifecycleService
from products.models import Option, OptionGroup, Product, ProductVariant
from tenant.models import Tenant


# ============================================================================
# TENANT FIXTURES
# ============================================================================

@pytest.fixture
def tenant_a(db):
    """Create test tenant A (Pizza Place). Uses the default 10% tax, 5% service."""
    return Tenant.objects.create(
        name='Pizza Place',
        slug='pizza-place',
        is_active=True
    )


@pytest.fixture
def tenant_b(db):
    """Create test tenant B (Burger Joint) with its own rates"""
    return Tenant.objects.create(
        name='Burger Joint',
        slug='burger-joint',
        is_active=True,
        tax_rate=Decimal('0.08'),
        service_charge_rate=Decimal('0.00'),
    )


@pytest.fixture
def inactive_tenant(db):
    """Create inactive test tenant"""
    return Tenant.objects.create(
        name='Closed Restaurant',
        slug='closed-restaurant',
        is_active=False
    )


# ============================================================================
# PRODUCT FIXTURES
# ============================================================================

@pytest.fixture
def burger_tenant_a(tenant_a):
    """
    Burger (100,000) with an optional multi-select 'Add-ons' group:
    Extra Cheese +15,000 and Bacon +5,000.
    """
    product = Product.objects.create(
        tenant=tenant_a,
        name='Burger',
        category='Burgers',
        base_price=Decimal('100000.00'),
    )
    addons = OptionGroup.objects.create(
        tenant=tenant_a,
        product=product,
        name='Add-ons',
        selection_type=OptionGroup.SelectionType.MULTIPLE,
        is_required=False,
    )
    Option.objects.create(tenant=tenant_a, group=addons, name='Extra Cheese',
                          price_delta=Decimal('15000.00'), display_order=1)
    Option.objects.create(tenant=tenant_a, group=addons, name='Bacon',
                          price_delta=Decimal('5000.00'), display_order=2)
    return product


@pytest.fixture
def burger_options(burger_tenant_a):
    """Dict of the burger's add-on options keyed by name"""
    group = burger_tenant_a.option_groups.get(name='Add-ons')
    return {option.name: option for option in group.options.all()}


@pytest.fixture
def pizza_tenant_a(tenant_a):
    """
    Pizza (80,000) with a required single 'Size' group (Small +0, Large +20,000),
    a multi-select 'Toppings' group limited to 2 (Cheese +10,000, Mushroom +5,000)
    and a legacy 'Family' variant (+30,000).
    """
    product = Product.objects.create(
        tenant=tenant_a,
        name='Pizza',
        category='Pizza',
        base_price=Decimal('80000.00'),
    )
    size = OptionGroup.objects.create(
        tenant=tenant_a,
        product=product,
        name='Size',
        selection_type=OptionGroup.SelectionType.SINGLE,
        is_required=True,
        display_order=1,
    )
    Option.objects.create(tenant=tenant_a, group=size, name='Small', price_delta=Decimal('0.00'))
    Option.objects.create(tenant=tenant_a, group=size, name='Large', price_delta=Decimal('20000.00'))

    toppings = OptionGroup.objects.create(
        tenant=tenant_a,
        product=product,
        name='Toppings',
        selection_type=OptionGroup.SelectionType.MULTIPLE,
        max_selections=2,
        display_order=2,
    )
    Option.objects.create(tenant=tenant_a, group=toppings, name='Cheese', price_delta=Decimal('10000.00'))
    Option.objects.create(tenant=tenant_a, group=toppings, name='Mushroom', price_delta=Decimal('5000.00'))

    ProductVariant.objects.create(
        tenant=tenant_a, product=product, name='Family', price_delta=Decimal('30000.00')
    )
    return product


@pytest.fixture
def pizza_catalog(pizza_tenant_a):
    """Lookup of the pizza's groups and options: {'Size': (group, {'Small': option, ...}), ...}"""
    catalog = {}
    for group in pizza_tenant_a.option_groups.all():
        catalog[group.name] = (group, {option.name: option for option in group.options.all()})
    return catalog


@pytest.fixture
def combo_tenant_a(tenant_a):
    """
    Combo Meal (50,000) with a nested modifier tree:

        Drink (required, single)
          Soda   +0
          Coffee +5,000
            Milk (optional, single; only under Coffee)
              Oat Milk +3,000
    """
    product = Product.objects.create(
        tenant=tenant_a,
        name='Combo Meal',
        category='Combos',
        base_price=Decimal('50000.00'),
    )
    drink = OptionGroup.objects.create(
        tenant=tenant_a,
        product=product,
        name='Drink',
        selection_type=OptionGroup.SelectionType.SINGLE,
        is_required=True,
    )
    Option.objects.create(tenant=tenant_a, group=drink, name='Soda', price_delta=Decimal('0.00'))
    coffee = Option.objects.create(tenant=tenant_a, group=drink, name='Coffee',
                                   price_delta=Decimal('5000.00'))
    milk = OptionGroup.objects.create(
        tenant=tenant_a,
        product=product,
        parent_option=coffee,
        name='Milk',
        selection_type=OptionGroup.SelectionType.SINGLE,
    )
    Option.objects.create(tenant=tenant_a, group=milk, name='Oat Milk', price_delta=Decimal('3000.00'))
    return product


@pytest.fixture
def product_tenant_b(tenant_b):
    """Create a product owned by tenant B"""
    return Product.objects.create(
        tenant=tenant_b,
        name='Fries',
        category='Sides',
        base_price=Decimal('25000.00'),
    )


# ============================================================================
# ORDER LINE FIXTURES (pure pricing inputs)
# ============================================================================

@pytest.fixture
def burger_line():
    """
    Burger with Extra Cheese and Bacon: 100,000 + 15,000 + 5,000 = 120,000.
    """
    addons = SelectedOptionGroup(
        group_id='addons',
        group_name='Add-ons',
        selected_options=(
            SelectedOption(group_id='addons', option_id='cheese', option_name='Extra Cheese',
                           group_name='Add-ons', price_delta=Decimal('15000')),
            SelectedOption(group_id='addons', option_id='bacon', option_name='Bacon',
                           group_name='Add-ons', price_delta=Decimal('5000')),
        ),
    )
    return OrderLine(
        product_id='burger',
        product_name='Burger',
        base_price=Decimal('100000'),
        quantity=1,
        selected_option_groups=(addons,),
    )


@pytest.fixture
def simple_line():
    """Plain 50.00 item, no options"""
    return OrderLine(product_id='water', product_name='Water', base_price=Decimal('50.00'))


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def draft_order(tenant_a, burger_line):
    """
    Draft order for tenant A with the burger line.
    Totals: subtotal 120,000, tax 12,000, service 6,000, total 138,000.
    """
    return OrderAssemblyService.create_order(tenant_a.id, [burger_line], table_number='T1').order


@pytest.fixture
def confirmed_order(draft_order, tenant_a):
    return OrderLifecycleService.confirm_order(draft_order.id, tenant_a.id)


@pytest.fixture
def preparing_order(confirmed_order, tenant_a):
    return OrderLifecycleService.start_preparing(confirmed_order.id, tenant_a.id)


@pytest.fixture
def ready_order(preparing_order, tenant_a):
    return OrderLifecycleService.mark_ready(preparing_order.id, tenant_a.id)


@pytest.fixture
def order_tenant_b(tenant_b):
    """Draft order owned by tenant B"""
    line = OrderLine(product_id='fries', product_name='Fries', base_price=Decimal('25000'))
    return OrderAssemblyService.create_order(tenant_b.id, [line]).order
