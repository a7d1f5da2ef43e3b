from django.contrib import admin
from .models import Option, OptionGroup, Product, ProductVariant


class ProductVariantInline(admin.TabularInline):
    model = ProductVariant
    extra = 0
    fields = ['name', 'price_delta', 'is_active', 'display_order']


class OptionGroupInline(admin.TabularInline):
    """Top-level option groups; nested groups are edited from the option group page."""
    model = OptionGroup
    extra = 0
    fields = ['name', 'selection_type', 'is_required', 'min_selections', 'max_selections', 'display_order']
    show_change_link = True

    def get_queryset(self, request):
        return super().get_queryset(request).filter(parent_option__isnull=True)


class OptionInline(admin.TabularInline):
    model = Option
    extra = 0
    fields = ['name', 'price_delta', 'is_available', 'display_order']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'base_price', 'tenant', 'is_active']
    list_filter = ['is_active', 'tenant', 'category']
    search_fields = ['name', 'category']
    inlines = [ProductVariantInline, OptionGroupInline]

    def save_formset(self, request, form, formset, change):
        # Inline rows inherit the product's tenant
        instances = formset.save(commit=False)
        for instance in instances:
            instance.tenant_id = form.instance.tenant_id
            instance.save()
        for obj in formset.deleted_objects:
            obj.delete()
        formset.save_m2m()


@admin.register(OptionGroup)
class OptionGroupAdmin(admin.ModelAdmin):
    list_display = ['name', 'product', 'parent_option', 'selection_type', 'is_required', 'tenant']
    list_filter = ['selection_type', 'is_required', 'tenant']
    search_fields = ['name', 'product__name']
    raw_id_fields = ['product', 'parent_option']
    inlines = [OptionInline]

    def save_formset(self, request, form, formset, change):
        instances = formset.save(commit=False)
        for instance in instances:
            instance.tenant_id = form.instance.tenant_id
            instance.save()
        for obj in formset.deleted_objects:
            obj.delete()
        formset.save_m2m()
