from decimal import Decimal

import pytest

from apps.core.exceptions import ValidationFailed
from apps.payments.currency import CurrencyService, quantize_money


@pytest.fixture
def converter():
    return CurrencyService(rates={'KHR': Decimal('4100')}, base_currency='USD')


def test_base_currency_always_supported(converter):
    assert converter.supported_currencies == ['KHR', 'USD']
    assert converter.get_exchange_rate('USD') == Decimal('1')


def test_to_base_divides_by_rate(converter):
    assert converter.to_base(Decimal('410000'), 'KHR') == Decimal('100')


def test_to_base_with_explicit_rate(converter):
    assert quantize_money(converter.to_base(Decimal('8200'), 'KHR', rate=Decimal('4000'))) == Decimal('2.05')


def test_to_local_rounds_half_up(converter):
    assert converter.to_local(Decimal('179.98'), Decimal('4100')) == Decimal('737918.00')
    assert converter.to_local(Decimal('0.005'), Decimal('1')) == Decimal('0.01')


def test_unsupported_currency_is_rejected(converter):
    with pytest.raises(ValidationFailed):
        converter.validate_currency('EUR')
    with pytest.raises(ValidationFailed):
        converter.to_base(Decimal('10'), 'EUR')


def test_non_positive_rate_is_rejected(converter):
    with pytest.raises(ValidationFailed):
        converter.to_base(Decimal('10'), 'KHR', rate=Decimal('0'))


def test_default_rates_come_from_settings(settings):
    settings.CURRENCY_RATES = {'USD': Decimal('1'), 'KHR': Decimal('4050')}
    assert CurrencyService().get_exchange_rate('KHR') == Decimal('4050')
