"""
Order financial calculator.

Turns priced order lines into the order-level breakdown stored on an Order:

    order_subtotal           = sum(line subtotals)
    subtotal_after_discount  = order_subtotal - total_discount
    tax_amount               = round(subtotal_after_discount * tax_rate)
    service_charge_amount    = round(subtotal_after_discount * service_charge_rate)
    total_amount             = subtotal_after_discount + tax_amount + service_charge_amount

Derived amounts are rounded to cents BEFORE they are summed, so the stored
total always equals the sum of the stored components.

Usage:
    from orders.calculators import OrderCalculator
    pricing = OrderCalculator(lines, tax_rate=Decimal("0.10"),
                              service_charge_rate=Decimal("0.05")).calculate()
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from orders.pricing import OrderLine
from payments.money import ZERO, apply_rate, quantize, sum_money, to_decimal


@dataclass(frozen=True)
class LinePricing:
    """Price breakdown of a single order line."""
    index: int
    product_id: str
    product_name: str
    quantity: int
    base_price: Decimal
    variant_delta: Decimal
    options_delta: Decimal
    unit_price: Decimal
    subtotal: Decimal

    def as_dict(self) -> dict:
        return {
            "index": self.index,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "base_price": str(self.base_price),
            "variant_delta": str(self.variant_delta),
            "options_delta": str(self.options_delta),
            "unit_price": str(self.unit_price),
            "subtotal": str(self.subtotal),
        }


@dataclass(frozen=True)
class PriceCalculation:
    """Order-level price breakdown returned by order assembly."""
    lines: Tuple[LinePricing, ...]
    order_subtotal: Decimal
    total_discount: Decimal
    subtotal_after_discount: Decimal
    tax_rate: Decimal
    service_charge_rate: Decimal
    tax_amount: Decimal
    service_charge_amount: Decimal
    total_amount: Decimal

    def as_dict(self) -> dict:
        return {
            "lines": [line.as_dict() for line in self.lines],
            "order_subtotal": str(self.order_subtotal),
            "total_discount": str(self.total_discount),
            "subtotal_after_discount": str(self.subtotal_after_discount),
            "tax_rate": str(self.tax_rate),
            "service_charge_rate": str(self.service_charge_rate),
            "tax_amount": str(self.tax_amount),
            "service_charge_amount": str(self.service_charge_amount),
            "total_amount": str(self.total_amount),
        }


class OrderCalculator:
    """
    Calculator for a list of OrderLine inputs.

    Discounts beyond a flat amount are not evaluated here; the flat amount
    defaults to zero and is capped at the subtotal.
    """

    def __init__(
        self,
        lines: Sequence[OrderLine],
        tax_rate,
        service_charge_rate,
        discount_amount=ZERO,
    ):
        self.lines = list(lines)
        self.tax_rate = to_decimal(tax_rate)
        self.service_charge_rate = to_decimal(service_charge_rate)
        self.discount_amount = to_decimal(discount_amount)

    def calculate_lines(self) -> List[LinePricing]:
        return [
            LinePricing(
                index=index,
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity,
                base_price=line.base_price,
                variant_delta=line.variant_price_delta,
                options_delta=line.options_delta,
                unit_price=line.unit_price,
                subtotal=quantize(line.line_total),
            )
            for index, line in enumerate(self.lines)
        ]

    def calculate_subtotal(self, line_pricing: Optional[List[LinePricing]] = None) -> Decimal:
        # Sum of the rounded line subtotals, so it matches the stored items
        if line_pricing is None:
            line_pricing = self.calculate_lines()
        return sum_money(line.subtotal for line in line_pricing)

    def calculate(self, line_pricing: Optional[List[LinePricing]] = None) -> PriceCalculation:
        if line_pricing is None:
            line_pricing = self.calculate_lines()

        order_subtotal = self.calculate_subtotal(line_pricing)
        total_discount = quantize(min(max(self.discount_amount, ZERO), order_subtotal))
        subtotal_after_discount = order_subtotal - total_discount

        tax_amount = apply_rate(subtotal_after_discount, self.tax_rate)
        service_charge_amount = apply_rate(subtotal_after_discount, self.service_charge_rate)
        total_amount = subtotal_after_discount + tax_amount + service_charge_amount

        return PriceCalculation(
            lines=tuple(line_pricing),
            order_subtotal=order_subtotal,
            total_discount=total_discount,
            subtotal_after_discount=subtotal_after_discount,
            tax_rate=self.tax_rate,
            service_charge_rate=self.service_charge_rate,
            tax_amount=tax_amount,
            service_charge_amount=service_charge_amount,
            total_amount=quantize(total_amount),
        )


def calculate_order_pricing(lines, tax_rate, service_charge_rate, discount_amount=ZERO) -> PriceCalculation:
    """Price a list of OrderLine inputs in one call."""
    return OrderCalculator(lines, tax_rate, service_charge_rate, discount_amount).calculate()
