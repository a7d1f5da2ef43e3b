import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from tenant.managers import TenantRecordManager, TenantSequenceManager


class Tenant(models.Model):
    """
    Root entity for multi-tenancy.
    Each customer (restaurant, cafe, food stall) is a tenant.

    Every order, payment and kitchen ticket is scoped to exactly one tenant.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(
        max_length=255,
        help_text="Display name for the tenant (e.g., Joe's Pizza)"
    )
    slug = models.SlugField(
        unique=True,
        help_text="URL-safe identifier for the tenant"
    )

    # Status
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive tenants cannot create or modify orders"
    )

    # Pricing configuration (null means use the project default)
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
        help_text="Tax rate as a fraction of the subtotal (0.10 = 10%). Blank uses the default."
    )
    service_charge_rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
        help_text="Service charge as a fraction of the subtotal. Blank uses the default."
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantRecordManager()

    class Meta:
        db_table = 'tenants'
        ordering = ['name']
        indexes = [
            models.Index(fields=['slug'], name='tenants_slug_idx'),
            models.Index(fields=['is_active'], name='tenants_is_active_idx'),
        ]

    def __str__(self):
        return self.name

    def get_effective_tax_rate(self) -> Decimal:
        """Tenant override if configured, otherwise POS_DEFAULT_TAX_RATE."""
        if self.tax_rate is not None:
            return Decimal(self.tax_rate)
        return Decimal(settings.POS_DEFAULT_TAX_RATE)

    def get_effective_service_charge_rate(self) -> Decimal:
        if self.service_charge_rate is not None:
            return Decimal(self.service_charge_rate)
        return Decimal(settings.POS_DEFAULT_SERVICE_CHARGE_RATE)


class TenantSequence(models.Model):
    """
    Per-tenant monotonic counter.

    Backs human-facing numbers such as order numbers (ORD-00001) and kitchen
    ticket numbers (KT-00001). The row is locked while incremented so two
    concurrent requests never receive the same value.
    """

    class Key(models.TextChoices):
        ORDER = "order", "Order Number"
        KITCHEN_TICKET = "kitchen_ticket", "Kitchen Ticket Number"

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name='sequences'
    )
    key = models.CharField(max_length=32, choices=Key.choices)
    last_value = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantSequenceManager()

    class Meta:
        db_table = 'tenant_sequences'
        constraints = [
            models.UniqueConstraint(fields=['tenant', 'key'], name='unique_tenant_sequence_key'),
        ]

    def __str__(self):
        return f"{self.tenant} {self.key}: {self.last_value}"
