from rest_framework import serializers

from payments.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source="order.order_number", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "order",
            "order_number",
            "amount",
            "method",
            "status",
            "transaction_ref",
            "notes",
            "paid_at",
        ]
        read_only_fields = fields


class RecordPaymentSerializer(serializers.Serializer):
    # Two-decimal precision and positivity are enforced by the reconciliation service
    amount = serializers.DecimalField(max_digits=12, decimal_places=4)
    method = serializers.ChoiceField(choices=Payment.PaymentMethod.choices)
    transaction_ref = serializers.CharField(
        max_length=100, required=False, allow_blank=True, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
