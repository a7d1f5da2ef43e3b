import uuid

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantScopedManager


class Payment(models.Model):
    """
    One payment applied to an order.

    Append-only: a payment is created once by reconciliation and never
    modified. An order's paid amount equals the sum of its payments.
    """

    class PaymentMethod(models.TextChoices):
        CASH = "cash", _("Cash")
        CARD = "card", _("Card")
        EWALLET = "ewallet", _("E-Wallet")
        OTHER = "other", _("Other")

    class PaymentStatus(models.TextChoices):
        COMPLETED = "completed", _("Completed")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='payments'
    )
    order = models.ForeignKey(
        'orders.Order', on_delete=models.PROTECT, related_name='payments'
    )
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    method = models.CharField(max_length=10, choices=PaymentMethod.choices)
    status = models.CharField(
        max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.COMPLETED
    )
    transaction_ref = models.CharField(
        max_length=100,
        blank=True,
        null=True,
        help_text=_("External reference, e.g. card terminal or e-wallet transaction id"),
    )
    notes = models.TextField(blank=True, null=True)
    paid_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantScopedManager()

    class Meta:
        ordering = ['paid_at', 'created_at']
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        indexes = [
            models.Index(fields=['tenant', 'order'], name='payment_tenant_order_idx'),
            models.Index(fields=['tenant', 'method'], name='payment_tenant_method_idx'),
            models.Index(fields=['tenant', 'paid_at'], name='payment_tenant_paid_idx'),
        ]

    def __str__(self):
        return f"Payment {self.amount} ({self.get_method_display()}) for Order {self.order.order_number}"
