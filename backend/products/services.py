"""
Catalog lookups and option selection validation.

The cart calls into this module to turn raw selections (ids chosen by the
user) into priced SelectedOptionGroup trees. Price deltas are copied from
the catalog at selection time.
"""

import logging
from collections import defaultdict
from collections.abc import Mapping
from typing import Dict, Iterable, List, Optional, Tuple

from django.core.exceptions import ValidationError as DjangoValidationError

from core_backend.exceptions import (
    MissingSelectionError,
    OptionSelectionError,
    ProductNotFoundError,
)
from orders.pricing import SelectedOption, SelectedOptionGroup
from products.models import OptionGroup, Product, ProductVariant

logger = logging.getLogger(__name__)


class CatalogService:
    """Read-only catalog access, always scoped to one tenant."""

    @staticmethod
    def get_product(tenant_id, product_id) -> Product:
        """
        Fetch an active product owned by the tenant.

        Products of other tenants are reported as missing.

        Raises:
            ProductNotFoundError
        """
        try:
            product = (
                Product.objects.for_tenant(tenant_id)
                .filter(pk=product_id, is_active=True)
                .first()
            )
        except (ValueError, DjangoValidationError):
            product = None

        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    @staticmethod
    def get_variant(product: Product, variant_id) -> Optional[ProductVariant]:
        if variant_id in (None, ""):
            return None
        try:
            variant = product.variants.filter(pk=variant_id, is_active=True).first()
        except (ValueError, DjangoValidationError):
            variant = None

        if variant is None:
            raise OptionSelectionError(
                f"Variant '{variant_id}' is not available for '{product.name}'"
            )
        return variant


class SelectionValidator:
    """
    Validates a selection tree against a product's option groups.

    Raw selections look like:

        [
            {"group_id": <uuid>, "options": [
                {"option_id": <uuid>, "child_groups": [...same shape...]},
            ]},
            {"group_id": <uuid>, "option_ids": [<uuid>, <uuid>]},
        ]

    Rules per group at each level of the tree:
    - required groups (or min_selections > 0) must have enough selections
    - single-choice groups accept at most one option
    - max_selections is enforced when set
    - options must belong to the group and be available
    - nested groups only apply under the option that unlocks them
    """

    def __init__(self, product: Product):
        self.product = product
        groups = list(
            OptionGroup.objects.filter(product=product).prefetch_related('options')
        )
        self._children: Dict[Optional[str], List[OptionGroup]] = defaultdict(list)
        for group in groups:
            parent_key = str(group.parent_option_id) if group.parent_option_id else None
            self._children[parent_key].append(group)
        for siblings in self._children.values():
            siblings.sort(key=lambda g: (g.display_order, g.name))

    def validate(self, selections: Iterable[dict] = ()) -> Tuple[SelectedOptionGroup, ...]:
        return self._validate_level(self._children.get(None, []), list(selections or ()))

    def _validate_level(self, groups: List[OptionGroup], selections: List[dict]):
        groups_by_id = {str(group.pk): group for group in groups}

        chosen_by_group: Dict[str, List[dict]] = {}
        for selection in selections:
            if not isinstance(selection, Mapping):
                raise OptionSelectionError(
                    f"Selections must be objects with a group_id, got {selection!r}"
                )
            group_id = str(selection.get("group_id"))
            if group_id not in groups_by_id:
                raise OptionSelectionError(
                    f"Option group '{group_id}' is not available for '{self.product.name}'"
                )
            if group_id in chosen_by_group:
                raise OptionSelectionError(f"Option group '{group_id}' was selected twice")
            chosen_by_group[group_id] = self._normalize_entries(selection)

        result = []
        for group in groups:
            entries = chosen_by_group.get(str(group.pk), [])
            self._check_counts(group, len(entries))
            if not entries:
                continue

            options_by_id = {str(option.pk): option for option in group.options.all()}
            seen = set()
            selected = []
            for entry in entries:
                option_id = str(entry.get("option_id"))
                option = options_by_id.get(option_id)
                if option is None or not option.is_available:
                    raise OptionSelectionError(
                        f"Option '{option_id}' is not available in '{group.name}'"
                    )
                if option_id in seen:
                    raise OptionSelectionError(
                        f"Option '{option.name}' was selected twice in '{group.name}'"
                    )
                seen.add(option_id)

                child_groups = self._validate_level(
                    self._children.get(option_id, []),
                    list(entry.get("child_groups") or ()),
                )
                selected.append(
                    SelectedOption(
                        group_id=group.pk,
                        group_name=group.name,
                        option_id=option.pk,
                        option_name=option.name,
                        price_delta=option.price_delta,
                        child_groups=child_groups,
                    )
                )

            result.append(
                SelectedOptionGroup(
                    group_id=group.pk,
                    group_name=group.name,
                    selected_options=tuple(selected),
                    selection_type=group.selection_type,
                )
            )
        return tuple(result)

    @staticmethod
    def _normalize_entries(selection: dict) -> List[dict]:
        if "options" in selection:
            entries = []
            for entry in selection.get("options") or ():
                if not isinstance(entry, Mapping):
                    raise OptionSelectionError(
                        f"Option entries must be objects with an option_id, got {entry!r}"
                    )
                entries.append(dict(entry))
            return entries
        return [{"option_id": option_id} for option_id in selection.get("option_ids") or ()]

    @staticmethod
    def _check_counts(group: OptionGroup, count: int):
        required = group.required_count
        if count == 0 and required > 0:
            raise MissingSelectionError(group.name)
        if count < required:
            raise OptionSelectionError(
                f"'{group.name}' requires at least {required} selections, got {count}"
            )
        allowed = group.allowed_count
        if allowed is not None and count > allowed:
            raise OptionSelectionError(
                f"'{group.name}' allows at most {allowed} selections, got {count}"
            )
