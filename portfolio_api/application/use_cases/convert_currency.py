from __future__ import annotations

from decimal import Decimal

from portfolio_api.application.dto.prices import ConvertCurrencyInput, ConvertCurrencyOutput
from portfolio_api.application.use_cases.get_currency_rates import GetCurrencyRatesUseCase
from portfolio_api.domain.exceptions import ConversionInputError
from portfolio_api.domain.services.cross_rates import SUPPORTED_CURRENCIES, convert, format_currency
from portfolio_api.shared.clock import utc_now


class ConvertCurrencyUseCase:
    def __init__(self, *, currency_rates: GetCurrencyRatesUseCase):
        self._currency_rates = currency_rates

    def execute(self, command: ConvertCurrencyInput) -> ConvertCurrencyOutput:
        source = command.source.strip().lower()
        target = command.target.strip().lower()
        for currency in (source, target):
            if currency not in SUPPORTED_CURRENCIES:
                raise ConversionInputError(
                    f"Unsupported currency: {currency}. Use one of {', '.join(SUPPORTED_CURRENCIES)}."
                )
        if not command.value.is_finite():
            raise ConversionInputError("value must be a finite number.")

        rates = {} if source == target else self._currency_rates.execute().rates
        converted, available = convert(command.value, source, target, rates)
        rate = Decimal("1") if source == target else rates.get(source, {}).get(target)

        return ConvertCurrencyOutput(
            value=command.value,
            source=source,
            target=target,
            converted=converted,
            rate=rate,
            rate_available=available,
            formatted=format_currency(converted, target if available else source),
            fetched_at=utc_now(),
        )
