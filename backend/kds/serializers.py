from rest_framework import serializers

from kds.models import KitchenTicket, KitchenTicketPriority


class KitchenTicketSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source="order.order_number", read_only=True)

    class Meta:
        model = KitchenTicket
        fields = [
            "id",
            "order",
            "order_number",
            "ticket_number",
            "status",
            "priority",
            "table_number",
            "items",
            "created_at",
            "printed_at",
            "completed_at",
        ]
        read_only_fields = fields


class IssueTicketSerializer(serializers.Serializer):
    priority = serializers.ChoiceField(
        choices=KitchenTicketPriority.choices, default=KitchenTicketPriority.NORMAL
    )
