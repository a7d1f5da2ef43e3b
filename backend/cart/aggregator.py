"""
In-memory cart aggregation.

A cart is a list of lines keyed by product, variant and the canonical form of
the selected options. Adding an identical configuration again merges into
the existing line instead of creating a duplicate, regardless of the order in
which the options were picked. No I/O happens here; catalog lookups live in
cart.services.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, Iterator, List, Optional, Tuple
import uuid

from django.conf import settings

from core_backend.exceptions import CartLineNotFoundError, CartValidationError
from orders.pricing import (
    OrderLine,
    SelectedOption,
    SelectedOptionGroup,
    calculate_item_total,
    calculate_selected_options_delta,
    flatten_selected_options,
)
from payments.money import ZERO, apply_rate, sum_money, to_decimal
from products.snapshots import ProductSnapshot, VariantSnapshot

NO_VARIANT = "no-variant"


def serialize_options(
    selected_options: Iterable[SelectedOption] = (),
    selected_option_groups: Iterable[SelectedOptionGroup] = (),
) -> str:
    """
    Canonical, order-independent form of a selection tree.

    Every option at every depth becomes a `group:option` pair; pairs are
    sorted by group id then option id and joined with `|`.
    """
    pairs = sorted(
        (option.group_id, option.option_id)
        for option in flatten_selected_options(selected_options, selected_option_groups)
    )
    return "|".join(f"{group_id}:{option_id}" for group_id, option_id in pairs)


def build_item_key(
    product_id,
    variant_id=None,
    selected_options: Iterable[SelectedOption] = (),
    selected_option_groups: Iterable[SelectedOptionGroup] = (),
) -> str:
    variant_part = str(variant_id) if variant_id else NO_VARIANT
    options_part = serialize_options(selected_options, selected_option_groups)
    return f"{product_id}:{variant_part}:{options_part}"


def _validate_quantity(quantity):
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise CartValidationError(f"Quantity must be an integer, got {quantity!r}")


@dataclass
class CartLine:
    """
    One cart row. `line_total` is recomputed on every mutation:

        (base_price + variant_delta + option deltas) * quantity
    """
    product: ProductSnapshot
    key: str
    quantity: int = 1
    variant: Optional[VariantSnapshot] = None
    selected_options: Tuple[SelectedOption, ...] = field(default_factory=tuple)
    selected_option_groups: Tuple[SelectedOptionGroup, ...] = field(default_factory=tuple)
    note: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    line_total: Decimal = ZERO

    def __post_init__(self):
        self.selected_options = tuple(self.selected_options)
        self.selected_option_groups = tuple(self.selected_option_groups)
        self.recalculate()

    @property
    def variant_delta(self) -> Decimal:
        return self.variant.price_delta if self.variant else ZERO

    @property
    def options_delta(self) -> Decimal:
        return calculate_selected_options_delta(self.selected_options, self.selected_option_groups)

    @property
    def unit_price(self) -> Decimal:
        return self.product.base_price + self.variant_delta + self.options_delta

    def recalculate(self) -> Decimal:
        self.line_total = calculate_item_total(
            self.product.base_price, self.variant_delta, self.options_delta, self.quantity
        )
        return self.line_total

    def to_order_line(self) -> OrderLine:
        return OrderLine(
            product_id=self.product.id,
            product_name=self.product.name,
            base_price=self.product.base_price,
            quantity=self.quantity,
            variant_id=self.variant.id if self.variant else None,
            variant_name=self.variant.name if self.variant else None,
            variant_price_delta=self.variant_delta,
            # Children are already in the flattened list, so drop the nesting
            selected_options=tuple(
                replace(option, child_groups=())
                for option in flatten_selected_options(self.selected_options, self.selected_option_groups)
            ),
            note=self.note,
        )


class CartAggregator:
    """
    Client-side cart with merge semantics.

    Usage:
        cart = CartAggregator()
        cart.add_item(pizza, selected_options=[small, cheese], quantity=1)
        cart.add_item(pizza, selected_options=[cheese, small], quantity=3)
        len(cart)        # 1
        cart.item_count  # 4
    """

    def __init__(self, tax_rate=None, service_charge_rate=None):
        if tax_rate is None:
            tax_rate = settings.POS_DEFAULT_TAX_RATE
        if service_charge_rate is None:
            service_charge_rate = settings.POS_DEFAULT_SERVICE_CHARGE_RATE
        self.tax_rate = to_decimal(tax_rate)
        self.service_charge_rate = to_decimal(service_charge_rate)
        self._lines: List[CartLine] = []

    def __iter__(self) -> Iterator[CartLine]:
        return iter(list(self._lines))

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines)

    def get_line(self, line_id) -> CartLine:
        for line in self._lines:
            if line.id == line_id:
                return line
        raise CartLineNotFoundError(line_id)

    def find_by_key(self, key) -> Optional[CartLine]:
        for line in self._lines:
            if line.key == key:
                return line
        return None

    def add_item(
        self,
        product: ProductSnapshot,
        variant: Optional[VariantSnapshot] = None,
        selected_options: Iterable[SelectedOption] = (),
        quantity: int = 1,
        selected_option_groups: Iterable[SelectedOptionGroup] = (),
        note: str = "",
    ) -> CartLine:
        """
        Add a configured product, merging into an identical line if present.

        On a merge the quantities add up and a new note is appended to the
        existing one unless it repeats it.

        Raises:
            CartValidationError: quantity is not a positive integer
        """
        _validate_quantity(quantity)
        if quantity <= 0:
            raise CartValidationError(f"Quantity must be positive, got {quantity}")

        selected_options = tuple(selected_options or ())
        selected_option_groups = tuple(selected_option_groups or ())
        key = build_item_key(
            product.id,
            variant.id if variant else None,
            selected_options,
            selected_option_groups,
        )

        existing = self.find_by_key(key)
        if existing is not None:
            existing.quantity += quantity
            if note and note not in existing.note.split("; "):
                existing.note = f"{existing.note}; {note}" if existing.note else note
            existing.recalculate()
            return existing

        line = CartLine(
            product=product,
            key=key,
            quantity=quantity,
            variant=variant,
            selected_options=selected_options,
            selected_option_groups=selected_option_groups,
            note=note or "",
        )
        self._lines.append(line)
        return line

    def remove_item(self, line_id) -> CartLine:
        line = self.get_line(line_id)
        self._lines.remove(line)
        return line

    def update_quantity(self, line_id, quantity: int) -> Optional[CartLine]:
        """Set a line's quantity; zero or less removes the line and returns None."""
        _validate_quantity(quantity)
        line = self.get_line(line_id)
        if quantity <= 0:
            self._lines.remove(line)
            return None
        line.quantity = quantity
        line.recalculate()
        return line

    def update_note(self, line_id, note: str) -> CartLine:
        line = self.get_line(line_id)
        line.note = note or ""
        return line

    def clear(self):
        self._lines = []

    @property
    def subtotal(self) -> Decimal:
        return sum_money(line.line_total for line in self._lines)

    @property
    def tax(self) -> Decimal:
        return apply_rate(self.subtotal, self.tax_rate)

    @property
    def service_charge(self) -> Decimal:
        return apply_rate(self.subtotal, self.service_charge_rate)

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax + self.service_charge

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def to_order_lines(self) -> List[OrderLine]:
        """Cart lines as order assembly inputs, with options flattened."""
        return [line.to_order_line() for line in self._lines]
