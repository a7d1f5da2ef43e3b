import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from orders.state_machine import (
    CLOSED_STATUSES,
    OPEN_STATUSES,
    OrderStatus,
    PaymentStatus,
    derive_payment_status,
    remaining_amount,
)
from tenant.managers import TenantScopedManager, TenantScopedQuerySet
from tenant.models import TenantSequence


class OrderQuerySet(TenantScopedQuerySet):

    def open(self):
        return self.filter(status__in=OPEN_STATUSES)

    def closed(self):
        return self.filter(status__in=CLOSED_STATUSES)


class OrderManager(TenantScopedManager.from_queryset(OrderQuerySet)):

    def generate_order_number(self, tenant) -> str:
        """
        Next tenant-scoped sequential order number.

        Example:
            Pizza Place:  ORD-00001, ORD-00002, ORD-00003
            Burger Joint: ORD-00001, ORD-00002
        """
        return TenantSequence.objects.next_number(
            tenant,
            TenantSequence.Key.ORDER,
            getattr(settings, 'POS_ORDER_NUMBER_PREFIX', 'ORD-'),
        )


class Order(models.Model):
    """
    A priced, stateful order.

    Created once by order assembly; afterwards only status transitions and
    payment application modify it. Pricing is never re-run.
    """
    Status = OrderStatus
    PaymentStatus = PaymentStatus

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='orders'
    )
    order_number = models.CharField(max_length=20)
    status = models.CharField(
        max_length=10, choices=OrderStatus.choices, default=OrderStatus.DRAFT
    )
    payment_status = models.CharField(
        max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.UNPAID
    )

    # --- Customer Fields ---
    customer_name = models.CharField(max_length=150, blank=True, null=True)
    table_number = models.CharField(max_length=20, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    # --- Financial Fields ---
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    tax_rate = models.DecimalField(
        max_digits=5, decimal_places=4, default=0,
        help_text=_("Tax rate applied when the order was assembled.")
    )
    tax_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    service_charge_rate = models.DecimalField(
        max_digits=5, decimal_places=4, default=0,
        help_text=_("Service charge rate applied when the order was assembled.")
    )
    service_charge_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    paid_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp when order was marked as completed."
    )

    objects = OrderManager()

    class Meta:
        # Show newest orders first, with order_number as secondary sort for same timestamps
        ordering = ["-created_at", "-order_number"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        constraints = [
            models.UniqueConstraint(fields=['tenant', 'order_number'], name='unique_order_number_per_tenant'),
        ]
        indexes = [
            models.Index(fields=['tenant', 'status'], name='order_tenant_stat_idx'),
            models.Index(fields=['tenant', 'payment_status'], name='order_tenant_pay_stat_idx'),
            models.Index(fields=['tenant', 'created_at'], name='order_tenant_created_idx'),
            models.Index(fields=['tenant', 'status', 'created_at'], name='order_ten_stat_dt_idx'),
        ]

    def __str__(self):
        return f"Order {self.order_number} ({self.get_status_display()})"

    @property
    def remaining_amount(self):
        return remaining_amount(self.paid_amount, self.total_amount)

    @property
    def derived_payment_status(self):
        return derive_payment_status(self.paid_amount, self.total_amount)

    def append_note(self, line: str):
        self.notes = f"{self.notes}\n{line}" if self.notes else line


class OrderItem(models.Model):
    """
    Frozen snapshot of one order line. Product, variant and option data are
    copied, not referenced, so catalog edits never alter past orders.
    """

    class ItemStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PREPARING = "preparing", _("Preparing")
        READY = "ready", _("Ready")
        SERVED = "served", _("Served")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='order_items'
    )
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    position = models.PositiveIntegerField(default=0)

    # Product snapshot
    product_id = models.CharField(max_length=64)
    product_name = models.CharField(max_length=200)
    base_price = models.DecimalField(max_digits=10, decimal_places=2)

    # Variant snapshot
    variant_id = models.CharField(max_length=64, blank=True, null=True)
    variant_name = models.CharField(max_length=100, blank=True, null=True)
    variant_price_delta = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Base price plus variant and option deltas at the time of sale."),
    )
    item_subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=10, choices=ItemStatus.choices, default=ItemStatus.PENDING
    )
    notes = models.TextField(
        blank=True, help_text=_("Customer notes, e.g., 'no onions'")
    )

    objects = TenantScopedManager()

    class Meta:
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        ordering = ['position']
        indexes = [
            models.Index(fields=['tenant', 'order'], name='item_tenant_order_idx'),
            models.Index(fields=['tenant', 'status'], name='item_tenant_stat_idx'),
        ]

    def __str__(self):
        return f"{self.quantity} of {self.product_name} in Order {self.order.order_number}"


class OrderItemOption(models.Model):
    """One flattened selected option, stored in first-seen order."""
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='order_item_options'
    )
    order_item = models.ForeignKey(
        OrderItem, on_delete=models.CASCADE, related_name='selected_options_snapshot'
    )
    position = models.PositiveIntegerField(default=0)
    group_id = models.CharField(max_length=64)
    group_name = models.CharField(max_length=100, blank=True)
    option_id = models.CharField(max_length=64)
    option_name = models.CharField(max_length=100, blank=True)
    price_delta = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    objects = TenantScopedManager()

    class Meta:
        ordering = ['position']
        indexes = [
            models.Index(fields=['tenant', 'order_item'], name='itemopt_tenant_item_idx'),
        ]

    def __str__(self):
        return f"{self.group_name}: {self.option_name} ({self.price_delta})"
