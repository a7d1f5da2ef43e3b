"""
Immutable catalog snapshots used by the pricing engine and the cart.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from payments.money import ZERO, to_decimal


@dataclass(frozen=True)
class VariantSnapshot:
    id: str
    name: str
    price_delta: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "price_delta", to_decimal(self.price_delta))

    @classmethod
    def from_model(cls, variant) -> "VariantSnapshot":
        return cls(id=str(variant.pk), name=variant.name, price_delta=variant.price_delta)


@dataclass(frozen=True)
class ProductSnapshot:
    id: str
    name: str
    base_price: Decimal
    tenant_id: Optional[str] = None
    category: str = ""
    is_active: bool = True

    def __post_init__(self):
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "base_price", to_decimal(self.base_price))
        if self.tenant_id is not None:
            object.__setattr__(self, "tenant_id", str(self.tenant_id))

    @classmethod
    def from_model(cls, product) -> "ProductSnapshot":
        return cls(
            id=str(product.pk),
            name=product.name,
            base_price=product.base_price,
            tenant_id=str(product.tenant_id),
            category=product.category,
            is_active=product.is_active,
        )
