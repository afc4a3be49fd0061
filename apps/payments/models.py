from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Payment(models.Model):
    """
    Audit record of money taken for a booking or a whole booking group.
    Rows are written once and never changed.
    """
    PAYMENT_METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('credit_card', 'Credit Card'),
        ('bank_transfer', 'Bank Transfer'),
    ]

    booking = models.ForeignKey(
        'bookings.Booking',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments'
    )
    booking_group_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    amount = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Amount in the currency it was paid in"
    )
    currency = models.CharField(max_length=3, default='USD')
    exchange_rate = models.DecimalField(max_digits=14, decimal_places=4, default=Decimal('1'))
    amount_usd = models.DecimalField(max_digits=12, decimal_places=2)
    amount_local = models.DecimalField(max_digits=16, decimal_places=2, null=True, blank=True)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='cash')
    transaction_id = models.CharField(max_length=100, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='processed_payments'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        db_table = 'payments'

    def __str__(self):
        target = self.booking_group_id or f"booking #{self.booking_id}"
        return f"{self.amount} {self.currency} for {target}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise ValueError("Payments are append-only and cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Payments are append-only and cannot be deleted")
