from rest_framework import serializers

from .currency import currency_service
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    processed_by_email = serializers.ReadOnlyField(source='processed_by.email')

    class Meta:
        model = Payment
        fields = [
            'id', 'booking', 'booking_group_id', 'amount', 'currency', 'exchange_rate',
            'amount_usd', 'amount_local', 'payment_method', 'transaction_id', 'notes',
            'processed_by', 'processed_by_email', 'created_at'
        ]
        read_only_fields = fields


class GroupPaymentSerializer(serializers.Serializer):
    """Payload for taking payment for a whole booking group"""
    payment_method = serializers.ChoiceField(choices=Payment.PAYMENT_METHOD_CHOICES)
    currency = serializers.CharField(max_length=3, default='USD')
    exchange_rate = serializers.DecimalField(max_digits=14, decimal_places=4, required=False, allow_null=True)
    transaction_id = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_currency(self, value):
        value = value.upper()
        if value not in currency_service.supported_currencies:
            raise serializers.ValidationError(f"Unsupported currency '{value}'.")
        return value

    def validate(self, attrs):
        currency = attrs.get('currency', currency_service.base_currency)
        rate = attrs.get('exchange_rate')
        if not currency_service.is_base(currency):
            if rate is None:
                raise serializers.ValidationError({'exchange_rate': f'Required when currency is {currency}.'})
            if rate <= 0:
                raise serializers.ValidationError({'exchange_rate': 'Must be positive.'})
        return attrs
