from django.contrib import admin
from .models import Order, OrderItem, OrderItemOption


class OrderItemOptionInline(admin.TabularInline):
    model = OrderItemOption
    extra = 0
    readonly_fields = ('group_name', 'option_name', 'price_delta')
    fields = ('group_name', 'option_name', 'price_delta')
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("product_name", "variant_name", "quantity", "unit_price", "item_subtotal", "status")
    readonly_fields = fields
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders are read-only in the admin. Pricing is fixed at assembly and
    status or payment changes must go through the service layer.
    """

    list_display = (
        "order_number",
        "tenant",
        "status",
        "payment_status",
        "get_total_formatted",
        "get_paid_formatted",
        "table_number",
        "created_at",
    )
    list_display_links = ("order_number",)
    search_fields = ("order_number", "customer_name", "table_number")
    list_filter = ("status", "payment_status", "tenant", "created_at")
    ordering = ("-created_at",)
    inlines = [OrderItemInline]
    readonly_fields = (
        "order_number",
        "tenant",
        "status",
        "payment_status",
        "subtotal",
        "discount_amount",
        "tax_rate",
        "tax_amount",
        "service_charge_rate",
        "service_charge_amount",
        "total_amount",
        "paid_amount",
        "created_at",
        "updated_at",
        "completed_at",
    )

    @admin.display(description="Total")
    def get_total_formatted(self, obj):
        return f"${obj.total_amount:,.2f}"

    @admin.display(description="Paid")
    def get_paid_formatted(self, obj):
        return f"${obj.paid_amount:,.2f}"

    def has_add_permission(self, request):
        return False


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("product_name", "order", "quantity", "unit_price", "item_subtotal", "status")
    list_filter = ("status", "tenant")
    search_fields = ("product_name", "order__order_number")
    readonly_fields = (
        "order",
        "tenant",
        "product_id",
        "product_name",
        "base_price",
        "variant_id",
        "variant_name",
        "variant_price_delta",
        "quantity",
        "unit_price",
        "item_subtotal",
    )
    inlines = [OrderItemOptionInline]

    def has_add_permission(self, request):
        return False
