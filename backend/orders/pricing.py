"""
Pricing engine for order lines.

Pure functions over immutable selection trees. A product's price is its base
price plus an optional legacy variant delta plus the deltas of every selected
option at every depth of the modifier tree:

    price_of_option(o) = o.price_delta + sum(price_of_group(g) for g in o.child_groups)
    price_of_group(g)  = sum(price_of_option(o) for o in g.selected_options)

Nothing here touches the database; the same functions price carts, order
assembly and tests.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from payments.money import ZERO, to_decimal


def _as_id(value) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class SelectedOption:
    """
    One chosen option inside a group, with the price delta captured at
    selection time and any nested groups the option unlocked.
    """
    group_id: str
    option_id: str
    price_delta: Decimal = ZERO
    group_name: str = ""
    option_name: str = ""
    child_groups: Tuple["SelectedOptionGroup", ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "group_id", _as_id(self.group_id))
        object.__setattr__(self, "option_id", _as_id(self.option_id))
        object.__setattr__(self, "price_delta", to_decimal(self.price_delta))
        object.__setattr__(self, "child_groups", tuple(self.child_groups))

    @classmethod
    def from_dict(cls, data: dict) -> "SelectedOption":
        return cls(
            group_id=data.get("group_id"),
            option_id=data.get("option_id"),
            price_delta=data.get("price_delta", ZERO),
            group_name=data.get("group_name") or "",
            option_name=data.get("option_name") or "",
            child_groups=tuple(
                SelectedOptionGroup.from_dict(child) for child in data.get("child_groups") or ()
            ),
        )

    def to_dict(self) -> dict:
        return {
            "group_id": self.group_id,
            "group_name": self.group_name,
            "option_id": self.option_id,
            "option_name": self.option_name,
            "price_delta": str(self.price_delta),
            "child_groups": [group.to_dict() for group in self.child_groups],
        }


@dataclass(frozen=True)
class SelectedOptionGroup:
    """A group and the options chosen from it, in selection order."""
    group_id: str
    group_name: str = ""
    selected_options: Tuple[SelectedOption, ...] = field(default_factory=tuple)
    selection_type: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "group_id", _as_id(self.group_id))
        object.__setattr__(self, "selected_options", tuple(self.selected_options))

    @classmethod
    def from_dict(cls, data: dict) -> "SelectedOptionGroup":
        group_id = data.get("group_id")
        group_name = data.get("group_name") or ""
        options = []
        for option in data.get("selected_options") or ():
            # Options inherit their group's identity when it is omitted
            option = dict(option)
            option.setdefault("group_id", group_id)
            option.setdefault("group_name", group_name)
            options.append(SelectedOption.from_dict(option))
        return cls(
            group_id=group_id,
            group_name=group_name,
            selected_options=tuple(options),
            selection_type=data.get("selection_type"),
        )

    def to_dict(self) -> dict:
        return {
            "group_id": self.group_id,
            "group_name": self.group_name,
            "selection_type": self.selection_type,
            "selected_options": [option.to_dict() for option in self.selected_options],
        }


def price_of_option(option: SelectedOption) -> Decimal:
    """Delta of an option plus everything nested beneath it."""
    return option.price_delta + sum(
        (price_of_group(group) for group in option.child_groups), ZERO
    )


def price_of_group(group: SelectedOptionGroup) -> Decimal:
    return sum((price_of_option(option) for option in group.selected_options), ZERO)


def calculate_selected_options_delta(
    selected_options: Optional[Iterable[SelectedOption]] = None,
    selected_option_groups: Optional[Iterable[SelectedOptionGroup]] = None,
) -> Decimal:
    """
    Total price delta of a selection tree.

    Accepts the flat legacy list, the grouped representation, or both at once
    for hybrid products. Missing inputs contribute zero.
    """
    direct = sum((price_of_option(option) for option in selected_options or ()), ZERO)
    grouped = sum((price_of_group(group) for group in selected_option_groups or ()), ZERO)
    return direct + grouped


def _walk_option(option: SelectedOption, out: List[SelectedOption]) -> None:
    out.append(option)
    for group in option.child_groups:
        for child in group.selected_options:
            _walk_option(child, out)


def flatten_selected_options(
    selected_options: Optional[Iterable[SelectedOption]] = None,
    selected_option_groups: Optional[Iterable[SelectedOptionGroup]] = None,
) -> List[SelectedOption]:
    """
    Every option at every depth as one list.

    Depth-first pre-order, flat options before grouped ones, first-seen order
    preserved and nothing deduplicated. Summing `price_delta` over the result
    equals `calculate_selected_options_delta` for the same input.
    """
    flattened: List[SelectedOption] = []
    for option in selected_options or ():
        _walk_option(option, flattened)
    for group in selected_option_groups or ():
        for option in group.selected_options:
            _walk_option(option, flattened)
    return flattened


def calculate_item_price(base_price, variant_delta=ZERO, options_delta=ZERO) -> Decimal:
    """Unit price: base + variant delta + option deltas."""
    return to_decimal(base_price) + to_decimal(variant_delta) + to_decimal(options_delta)


def calculate_item_total(base_price, variant_delta=ZERO, options_delta=ZERO, quantity=1) -> Decimal:
    return calculate_item_price(base_price, variant_delta, options_delta) * int(quantity)


@dataclass(frozen=True)
class OrderLine:
    """
    One line handed to order assembly: a product snapshot, an optional
    variant, the selection tree and a quantity.
    """
    product_id: str
    product_name: str
    base_price: Decimal
    quantity: int = 1
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None
    variant_price_delta: Decimal = ZERO
    selected_options: Tuple[SelectedOption, ...] = field(default_factory=tuple)
    selected_option_groups: Tuple[SelectedOptionGroup, ...] = field(default_factory=tuple)
    note: str = ""

    def __post_init__(self):
        object.__setattr__(self, "product_id", _as_id(self.product_id))
        if self.variant_id is not None:
            object.__setattr__(self, "variant_id", _as_id(self.variant_id))
        object.__setattr__(self, "base_price", to_decimal(self.base_price))
        object.__setattr__(self, "variant_price_delta", to_decimal(self.variant_price_delta))
        object.__setattr__(self, "selected_options", tuple(self.selected_options))
        object.__setattr__(self, "selected_option_groups", tuple(self.selected_option_groups))

    @property
    def options_delta(self) -> Decimal:
        return calculate_selected_options_delta(self.selected_options, self.selected_option_groups)

    @property
    def unit_price(self) -> Decimal:
        return calculate_item_price(self.base_price, self.variant_price_delta, self.options_delta)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def flattened_options(self) -> List[SelectedOption]:
        return flatten_selected_options(self.selected_options, self.selected_option_groups)
