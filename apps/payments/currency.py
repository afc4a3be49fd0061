# apps/payments/currency.py
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from django.conf import settings

from apps.core.exceptions import ValidationFailed

CENTS = Decimal('0.01')


def quantize_money(value):
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


class CurrencyService:
    """
    Exchange rates relative to the base currency (1 base unit = rate units).

    Rates come from settings; the base currency always has rate 1. An
    unsupported code is an input error, never a silent default.
    """

    def __init__(self, rates=None, base_currency=None):
        self.base_currency = base_currency or settings.BASE_CURRENCY
        self.rates = dict(rates if rates is not None else settings.CURRENCY_RATES)
        self.rates[self.base_currency] = Decimal('1')

    @property
    def supported_currencies(self):
        return sorted(self.rates)

    def is_base(self, currency):
        return currency == self.base_currency

    def validate_currency(self, currency):
        if currency not in self.rates:
            raise ValidationFailed(
                f"Unsupported currency '{currency}'. Must be one of: {', '.join(self.supported_currencies)}"
            )
        return currency

    def get_exchange_rate(self, currency):
        self.validate_currency(currency)
        return Decimal(self.rates[currency])

    def to_base(self, amount, currency, rate=None):
        """Convert ``amount`` expressed in ``currency`` into the base currency."""
        rate = Decimal(rate) if rate is not None else self.get_exchange_rate(currency)
        if rate <= 0:
            raise ValidationFailed('Exchange rate must be positive')
        try:
            return Decimal(amount) / rate
        except InvalidOperation:
            raise ValidationFailed(f"Invalid amount '{amount}'")

    @staticmethod
    def to_local(amount, rate):
        """Convert a base-currency ``amount`` into local currency at ``rate``."""
        return quantize_money(Decimal(amount) * Decimal(rate))


currency_service = CurrencyService()
