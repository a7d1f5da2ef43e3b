from django.contrib import admin
from .models import KitchenTicket


@admin.register(KitchenTicket)
class KitchenTicketAdmin(admin.ModelAdmin):
    list_display = [
        'ticket_number',
        'order',
        'status',
        'priority',
        'table_number',
        'tenant',
        'created_at',
    ]
    list_filter = ['status', 'priority', 'tenant', 'created_at']
    search_fields = ['ticket_number', 'order__order_number', 'table_number']
    readonly_fields = ['id', 'tenant', 'order', 'ticket_number', 'items', 'created_at', 'updated_at']
    ordering = ['-created_at']
