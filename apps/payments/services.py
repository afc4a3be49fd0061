# apps/payments/services.py
import logging
from decimal import Decimal

from apps.bookings.aggregation import aggregate_group_status
from apps.bookings.models import Booking
from apps.core.db import atomic_operation
from apps.core.exceptions import NotFoundError, ValidationFailed
from .currency import currency_service, quantize_money
from .models import Payment

logger = logging.getLogger(__name__)


def record_payment(actor, amount, currency, exchange_rate=None, booking=None, booking_group_id=None,
                   payment_method='cash', transaction_id=None, notes=None):
    """
    Append a Payment row. ``amount`` is in ``currency``; the base-currency
    amount is derived from the exchange rate, which is mandatory for any
    currency other than the base one.
    """
    actor.require_admin()
    if booking is None and not booking_group_id:
        raise ValidationFailed('A payment must reference a booking or a booking group')

    currency_service.validate_currency(currency)
    if currency_service.is_base(currency):
        exchange_rate = Decimal('1')
    elif exchange_rate is None:
        raise ValidationFailed(f'An exchange rate is required for payments in {currency}')

    amount = quantize_money(amount)
    amount_usd = quantize_money(currency_service.to_base(amount, currency, exchange_rate))

    payment = Payment.objects.create(
        booking=booking,
        booking_group_id=booking_group_id or (booking.group_id if booking else None),
        amount=amount,
        currency=currency,
        exchange_rate=exchange_rate,
        amount_usd=amount_usd,
        amount_local=None if currency_service.is_base(currency) else amount,
        payment_method=payment_method,
        transaction_id=transaction_id,
        notes=notes,
        processed_by_id=actor.id,
    )
    logger.info(
        f"Recorded payment #{payment.pk}: {amount} {currency} ({amount_usd} USD) "
        f"for {payment.booking_group_id} by user #{actor.id}"
    )
    return payment


def process_group_payment(actor, group_id, payment_method, currency, exchange_rate=None,
                          transaction_id=None, notes=None):
    """
    Take payment for a whole booking group: one Payment row for the group
    total, and every member marked paid. Amount sufficiency is not checked;
    the amount charged is the group total.
    """
    actor.require_admin()
    bookings = list(Booking.objects.in_group(group_id))
    if not bookings:
        raise NotFoundError('Booking group not found')

    currency_service.validate_currency(currency)
    is_base = currency_service.is_base(currency)
    if not is_base and exchange_rate is None:
        raise ValidationFailed(f'An exchange rate is required for payments in {currency}')

    total_usd = quantize_money(sum((b.total_price for b in bookings), Decimal('0')))
    total_local = None if is_base else currency_service.to_local(total_usd, exchange_rate)

    with atomic_operation('Payment processing'):
        payment = record_payment(
            actor,
            amount=total_usd if is_base else total_local,
            currency=currency,
            exchange_rate=exchange_rate,
            booking_group_id=group_id,
            payment_method=payment_method,
            transaction_id=transaction_id,
            notes=notes,
        )
        for booking in bookings:
            booking.payment_status = Booking.PAID
            booking.payment_method = payment_method
            booking.currency = currency
            if is_base:
                booking.exchange_rate = None
                booking.total_price_local = None
            else:
                booking.exchange_rate = exchange_rate
                booking.total_price_local = currency_service.to_local(booking.total_price, exchange_rate)
            booking.save()

    return {
        'booking_group_id': group_id,
        'payment_id': payment.pk,
        'payment_method': payment.payment_method,
        'booking_status': aggregate_group_status(b.status for b in bookings),
        'payment_status': Booking.PAID,
        'amount': {
            'usd': str(total_usd),
            'local': str(total_local) if total_local is not None else None,
            'currency': currency,
        },
        'exchange_rate': str(exchange_rate) if not is_base else None,
        'transaction_id': payment.transaction_id,
        'timestamp': payment.created_at.isoformat(),
    }
