from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional
import logging

from django.db import transaction

from core_backend.exceptions import EmptyOrderError, LineValidationError, POSValidationError
from orders.calculators import OrderCalculator, PriceCalculation
from orders.models import Order, OrderItem, OrderItemOption
from orders.pricing import OrderLine
from orders.state_machine import OrderStatus, PaymentStatus
from payments.money import ZERO, has_money_precision, to_decimal
from tenant.models import Tenant

logger = logging.getLogger(__name__)

RATE_PLACES = Decimal("0.0001")


@dataclass(frozen=True)
class OrderAssemblyResult:
    order: Order
    pricing: PriceCalculation


class OrderAssemblyService:
    """Builds a priced draft order from cart lines."""

    @staticmethod
    @transaction.atomic
    def create_order(
        tenant_id,
        lines: Iterable[OrderLine],
        tax_rate=None,
        service_charge_rate=None,
        customer_name: Optional[str] = None,
        table_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> OrderAssemblyResult:
        """
        Price the lines, allocate an order number and persist the order.

        Option deltas are taken from the lines as captured in the cart; the
        catalog is not consulted again. The order is stored in `draft` with
        nothing paid and every item `pending`.

        Args:
            tenant_id: Tenant instance or id the order belongs to
            lines: OrderLine inputs, at least one
            tax_rate / service_charge_rate: fractional overrides (0.10 = 10%);
                None uses the tenant's effective rate

        Raises:
            TenantNotFoundError / InactiveTenantError: tenant unusable
            EmptyOrderError: no lines
            LineValidationError: bad quantity or price on a line
            POSValidationError: rate override outside [0, 1]
        """
        tenant = Tenant.objects.get_active(tenant_id)

        lines = list(lines or ())
        if not lines:
            raise EmptyOrderError()
        OrderAssemblyService._validate_lines(lines)

        tax_rate = OrderAssemblyService._resolve_rate(
            tax_rate, tenant.get_effective_tax_rate(), "tax_rate"
        )
        service_charge_rate = OrderAssemblyService._resolve_rate(
            service_charge_rate, tenant.get_effective_service_charge_rate(), "service_charge_rate"
        )

        pricing = OrderCalculator(lines, tax_rate, service_charge_rate).calculate()

        order = Order.objects.create(
            tenant=tenant,
            order_number=Order.objects.generate_order_number(tenant),
            status=OrderStatus.DRAFT,
            payment_status=PaymentStatus.UNPAID,
            customer_name=customer_name or None,
            table_number=table_number or None,
            notes=notes or None,
            subtotal=pricing.order_subtotal,
            discount_amount=pricing.total_discount,
            tax_rate=tax_rate,
            tax_amount=pricing.tax_amount,
            service_charge_rate=service_charge_rate,
            service_charge_amount=pricing.service_charge_amount,
            total_amount=pricing.total_amount,
            paid_amount=ZERO,
        )

        for position, (line, line_pricing) in enumerate(zip(lines, pricing.lines)):
            OrderAssemblyService._create_item(order, position, line, line_pricing)

        logger.info(
            f"Order {order.order_number} created for tenant {tenant.slug}: "
            f"{len(lines)} lines, total {order.total_amount}"
        )
        return OrderAssemblyResult(order=order, pricing=pricing)

    @staticmethod
    def _create_item(order, position, line: OrderLine, line_pricing) -> OrderItem:
        item = OrderItem.objects.create(
            tenant=order.tenant,
            order=order,
            position=position,
            product_id=line.product_id,
            product_name=line.product_name,
            base_price=line.base_price,
            variant_id=line.variant_id,
            variant_name=line.variant_name,
            variant_price_delta=line.variant_price_delta,
            quantity=line.quantity,
            unit_price=line_pricing.unit_price,
            item_subtotal=line_pricing.subtotal,
            status=OrderItem.ItemStatus.PENDING,
            notes=line.note or "",
        )
        OrderItemOption.objects.bulk_create([
            OrderItemOption(
                tenant=order.tenant,
                order_item=item,
                position=index,
                group_id=option.group_id,
                group_name=option.group_name,
                option_id=option.option_id,
                option_name=option.option_name,
                price_delta=option.price_delta,
            )
            for index, option in enumerate(line.flattened_options())
        ])
        return item

    @staticmethod
    def _validate_lines(lines):
        for index, line in enumerate(lines):
            quantity = line.quantity
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise LineValidationError(index, "quantity must be a positive integer")
            if line.base_price < ZERO:
                raise LineValidationError(index, "base price cannot be negative")
            if not line.product_id:
                raise LineValidationError(index, "product id is required")
            if not has_money_precision(line.base_price):
                raise LineValidationError(index, f"base price {line.base_price} has more than 2 decimal places")
            if not has_money_precision(line.variant_price_delta):
                raise LineValidationError(
                    index, f"variant price delta {line.variant_price_delta} has more than 2 decimal places"
                )
            for option in line.flattened_options():
                if not has_money_precision(option.price_delta):
                    raise LineValidationError(
                        index,
                        f"option '{option.option_name}' price delta {option.price_delta} "
                        f"has more than 2 decimal places",
                    )

    @staticmethod
    def _resolve_rate(override, default, name) -> Decimal:
        if override is None:
            return to_decimal(default)
        try:
            rate = to_decimal(override)
        except ValueError:
            raise POSValidationError(f"{name} must be a number")
        if rate < 0 or rate > 1:
            raise POSValidationError(f"{name} must be between 0 and 1, got {rate}")
        if rate != rate.quantize(RATE_PLACES):
            raise POSValidationError(f"{name} supports at most 4 decimal places")
        return rate
