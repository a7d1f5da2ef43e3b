from django.contrib import admin
from .models import Tenant, TenantSequence


class TenantSequenceInline(admin.TabularInline):
    """Read-only view of the tenant's numbering counters."""
    model = TenantSequence
    extra = 0
    fields = ['key', 'last_value', 'updated_at']
    readonly_fields = ['key', 'last_value', 'updated_at']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = [
        'name',
        'slug',
        'tax_rate',
        'service_charge_rate',
        'is_active',
        'created_at'
    ]
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'slug']
    readonly_fields = ['id', 'created_at', 'updated_at']
    prepopulated_fields = {'slug': ('name',)}
    inlines = [TenantSequenceInline]

    fieldsets = (
        ('Basic Info', {
            'fields': ('id', 'name', 'slug', 'is_active')
        }),
        ('Pricing', {
            'fields': ('tax_rate', 'service_charge_rate'),
            'description': 'Leave blank to use the default tax and service charge rates'
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
