from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin view for the Payment model. Payments are append-only, so every
    field is read-only and deletion is disabled.
    """

    list_display = (
        "id",
        "order",
        "amount",
        "method",
        "status",
        "tenant",
        "paid_at",
    )
    list_filter = ("method", "status", "tenant", "paid_at")
    search_fields = ("order__order_number", "transaction_ref")
    readonly_fields = (
        "id",
        "tenant",
        "order",
        "amount",
        "method",
        "status",
        "transaction_ref",
        "notes",
        "paid_at",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
