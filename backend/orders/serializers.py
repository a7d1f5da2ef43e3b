from rest_framework import serializers

from orders.models import Order, OrderItem, OrderItemOption


class OrderItemOptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItemOption
        fields = ["group_id", "group_name", "option_id", "option_name", "price_delta"]


class OrderItemSerializer(serializers.ModelSerializer):
    selected_options = OrderItemOptionSerializer(
        source="selected_options_snapshot", many=True, read_only=True
    )

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "base_price",
            "variant_id",
            "variant_name",
            "variant_price_delta",
            "selected_options",
            "quantity",
            "unit_price",
            "item_subtotal",
            "status",
            "notes",
        ]


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    remaining_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, read_only=True
    )

    class Meta:
        model = Order
        fields = [
            "id",
            "tenant",
            "order_number",
            "status",
            "payment_status",
            "customer_name",
            "table_number",
            "notes",
            "subtotal",
            "discount_amount",
            "tax_rate",
            "tax_amount",
            "service_charge_rate",
            "service_charge_amount",
            "total_amount",
            "paid_amount",
            "remaining_amount",
            "items",
            "created_at",
            "updated_at",
            "completed_at",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for open order and history listings."""
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "payment_status",
            "customer_name",
            "table_number",
            "total_amount",
            "paid_amount",
            "item_count",
            "created_at",
            "completed_at",
        ]
        read_only_fields = fields

    def get_item_count(self, obj):
        return sum(item.quantity for item in obj.items.all())


# --- Input serializers ---

class SelectedOptionInputSerializer(serializers.Serializer):
    option_id = serializers.UUIDField()

    def get_fields(self):
        # Nested groups have the same shape as `selections`, one level down
        fields = super().get_fields()
        fields["child_groups"] = SelectionInputSerializer(many=True, required=False, default=list)
        return fields


class SelectionInputSerializer(serializers.Serializer):
    group_id = serializers.UUIDField()
    options = SelectedOptionInputSerializer(many=True, required=False)
    option_ids = serializers.ListField(child=serializers.UUIDField(), required=False)

    def validate(self, attrs):
        if "options" not in attrs and "option_ids" not in attrs:
            attrs["options"] = []
        return attrs


class OrderCreateItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    variant_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.IntegerField(min_value=1, default=1)
    selections = SelectionInputSerializer(many=True, required=False, default=list)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class OrderCreateSerializer(serializers.Serializer):
    items = OrderCreateItemSerializer(many=True)
    customer_name = serializers.CharField(
        max_length=150, required=False, allow_blank=True, allow_null=True
    )
    table_number = serializers.CharField(
        max_length=20, required=False, allow_blank=True, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class OrderCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
