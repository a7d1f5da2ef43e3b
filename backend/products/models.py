import uuid

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantScopedManager


class Product(models.Model):
    """
    A sellable catalog item.

    Pricing reads the product through an immutable ProductSnapshot, so later
    catalog edits never change carts or orders that were already priced.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='products'
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(
        max_length=100,
        blank=True,
        help_text=_("Menu category used for grouping, e.g., 'Burgers'")
    )
    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        help_text=_("Price before variant and option adjustments."),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantScopedManager()

    class Meta:
        ordering = ['category', 'name']
        indexes = [
            models.Index(fields=['tenant', 'is_active'], name='product_tenant_active_idx'),
            models.Index(fields=['tenant', 'category'], name='product_tenant_cat_idx'),
        ]

    def __str__(self):
        return self.name


class ProductVariant(models.Model):
    """
    Legacy single-choice variant (e.g., size). At most one per cart line.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='product_variants'
    )
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='variants')
    name = models.CharField(max_length=100)
    price_delta = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        help_text=_("The amount to add or subtract from the base product price."),
    )
    is_active = models.BooleanField(default=True)
    display_order = models.PositiveIntegerField(default=0)

    objects = TenantScopedManager()

    class Meta:
        ordering = ['display_order', 'name']
        unique_together = ('product', 'name')

    def __str__(self):
        return f"{self.product.name} - {self.name}"


class OptionGroup(models.Model):
    """
    A set of selectable modifiers on a product, e.g. 'Choose your size'.

    Groups with `parent_option` set are nested: they only apply once that
    option has been chosen, which gives the recursive modifier tree.
    """

    class SelectionType(models.TextChoices):
        SINGLE = "single", _("Single Choice")
        MULTIPLE = "multiple", _("Multiple Choices")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='option_groups'
    )
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='option_groups')
    parent_option = models.ForeignKey(
        'Option',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='child_groups',
        help_text=_("If set, this group only appears when the option is chosen."),
    )
    name = models.CharField(
        max_length=100, help_text=_("Customer-facing name, e.g., 'Choose your size'")
    )
    selection_type = models.CharField(
        max_length=10, choices=SelectionType.choices, default=SelectionType.SINGLE
    )
    is_required = models.BooleanField(default=False)
    min_selections = models.PositiveIntegerField(
        default=0, help_text=_("Minimum required selections (0 for optional)")
    )
    max_selections = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text=_("Maximum allowed selections (null for unlimited)"),
    )
    display_order = models.PositiveIntegerField(default=0)

    objects = TenantScopedManager()

    class Meta:
        ordering = ['display_order', 'name']
        indexes = [
            models.Index(fields=['tenant', 'product'], name='optgroup_tenant_product_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def required_count(self) -> int:
        """Minimum number of options that must be chosen."""
        if self.is_required:
            return max(self.min_selections, 1)
        return self.min_selections

    @property
    def allowed_count(self):
        """Maximum number of options, None for unlimited."""
        if self.selection_type == self.SelectionType.SINGLE:
            return 1 if self.max_selections is None else min(self.max_selections, 1)
        return self.max_selections


class Option(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='options'
    )
    group = models.ForeignKey(OptionGroup, on_delete=models.CASCADE, related_name='options')
    name = models.CharField(max_length=100)
    price_delta = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        help_text=_("The amount to add or subtract from the base product price."),
    )
    is_available = models.BooleanField(default=True)
    display_order = models.PositiveIntegerField(default=0)

    objects = TenantScopedManager()

    class Meta:
        ordering = ['display_order', 'name']
        unique_together = ('group', 'name')

    def __str__(self):
        return f"{self.group.name} - {self.name}"
