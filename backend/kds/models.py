import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantScopedManager, TenantScopedQuerySet
from tenant.models import TenantSequence


class KitchenTicketStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PREPARING = 'preparing', 'Preparing'
    READY = 'ready', 'Ready'
    SERVED = 'served', 'Served'


class KitchenTicketPriority(models.TextChoices):
    NORMAL = 'normal', 'Normal'
    HIGH = 'high', 'High'
    URGENT = 'urgent', 'Urgent'


class KitchenTicketQuerySet(TenantScopedQuerySet):

    def active(self):
        return self.exclude(status=KitchenTicketStatus.SERVED)

    def for_order(self, order):
        return self.filter(order=order)


class KitchenTicketManager(TenantScopedManager.from_queryset(KitchenTicketQuerySet)):
    """Custom manager for kitchen tickets with numbering"""

    def generate_ticket_number(self, tenant) -> str:
        """Next tenant-scoped ticket number, e.g. KT-00001."""
        return TenantSequence.objects.next_number(
            tenant,
            TenantSequence.Key.KITCHEN_TICKET,
            getattr(settings, 'POS_TICKET_NUMBER_PREFIX', 'KT-'),
        )


class KitchenTicket(models.Model):
    """
    Fulfillment-facing copy of an order's pending items.

    `items` is a JSON snapshot taken when the ticket is issued, so later
    order changes never rewrite a ticket already in the kitchen.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='kitchen_tickets'
    )
    order = models.ForeignKey(
        'orders.Order', on_delete=models.CASCADE, related_name='kitchen_tickets'
    )
    ticket_number = models.CharField(max_length=20)
    status = models.CharField(
        max_length=20,
        choices=KitchenTicketStatus.choices,
        default=KitchenTicketStatus.PENDING
    )
    priority = models.CharField(
        max_length=10,
        choices=KitchenTicketPriority.choices,
        default=KitchenTicketPriority.NORMAL
    )
    table_number = models.CharField(max_length=20, blank=True, null=True)
    items = models.JSONField(
        default=list,
        help_text=_("Snapshot of the order items sent to the kitchen")
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    printed_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    objects = KitchenTicketManager()

    class Meta:
        ordering = ['created_at']
        constraints = [
            models.UniqueConstraint(fields=['tenant', 'ticket_number'], name='unique_ticket_number_per_tenant'),
        ]
        indexes = [
            models.Index(fields=['tenant', 'status'], name='ticket_tenant_stat_idx'),
            models.Index(fields=['tenant', 'order'], name='ticket_tenant_order_idx'),
        ]

    def __str__(self):
        return f"Ticket {self.ticket_number} for Order {self.order.order_number}"
