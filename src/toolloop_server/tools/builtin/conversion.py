"""Unit and currency conversion tools backed by static tables."""

from typing import Callable

from toolloop_server.tools.types import ParameterSchema, ParameterType, ToolContract

# Linear units: factor to the category's base unit (meters, kilograms)
LINEAR_UNITS: dict[str, dict[str, float]] = {
    "length": {
        "meters": 1.0,
        "feet": 0.3048,
        "yards": 0.9144,
    },
    "weight": {
        "kilograms": 1.0,
        "grams": 0.001,
        "pounds": 0.453592,
    },
}

TEMPERATURE_CONVERSIONS: dict[tuple[str, str], Callable[[float], float]] = {
    ("celsius", "fahrenheit"): lambda c: c * 9 / 5 + 32,
    ("fahrenheit", "celsius"): lambda f: (f - 32) * 5 / 9,
    ("celsius", "celsius"): lambda c: c,
    ("fahrenheit", "fahrenheit"): lambda f: f,
}

# Units per 1 USD
EXCHANGE_RATES: dict[str, float] = {
    "USD": 1,
    "EUR": 0.85,
    "GBP": 0.75,
    "JPY": 110,
    "AUD": 1.3,
    "CAD": 1.25,
    "INR": 75,
    "CNY": 6.5,
    "MXN": 20,
    "AED": 3.67,
    "BRL": 5.39,
    "ZAR": 14.55,
    "SAR": 3.75,
    "SEK": 8.77,
    "CHF": 0.92,
    "NZD": 1.44,
    "SGD": 1.33,
    "HKD": 7.77,
    "RUB": 74.6,
    "KRW": 1173,
    "TRY": 14.2,
}


def convert_units(value: float, from_unit: str, to_unit: str) -> float:
    """Convert a value between two units of the same category.

    Raises:
        ValueError: If either unit is unknown or the units are incompatible
    """
    source = from_unit.strip().lower()
    target = to_unit.strip().lower()

    temperature = TEMPERATURE_CONVERSIONS.get((source, target))
    if temperature is not None:
        return temperature(value)

    for factors in LINEAR_UNITS.values():
        if source in factors and target in factors:
            return value * factors[source] / factors[target]

    raise ValueError(f"Invalid units for conversion: {from_unit} -> {to_unit}")


def convert_currency(amount: float, from_currency: str, to_currency: str) -> float:
    """Convert an amount between two currencies via USD.

    Raises:
        ValueError: If either currency code is unknown
    """
    source = from_currency.strip().upper()
    target = to_currency.strip().upper()
    if source not in EXCHANGE_RATES or target not in EXCHANGE_RATES:
        raise ValueError(
            f"Invalid currency codes for conversion: {from_currency} -> {to_currency}"
        )
    return amount / EXCHANGE_RATES[source] * EXCHANGE_RATES[target]


async def unit_conversion(value: float, fromUnit: str, toUnit: str) -> dict:
    return {"result": convert_units(value, fromUnit, toUnit)}


async def currency_conversion(amount: float, fromCurrency: str, toCurrency: str) -> dict:
    return {"result": convert_currency(amount, fromCurrency, toCurrency)}


UNIT_CONVERSION = ToolContract(
    name="unit_conversion",
    description="Convert units from one measurement to another",
    parameters={
        "value": ParameterSchema(ParameterType.NUMBER, "The value to convert"),
        "fromUnit": ParameterSchema(
            ParameterType.STRING, "The source unit (e.g., 'meters')"
        ),
        "toUnit": ParameterSchema(ParameterType.STRING, "The target unit (e.g., 'feet')"),
    },
    required=frozenset({"value", "fromUnit", "toUnit"}),
    handler=unit_conversion,
)

CURRENCY_CONVERSION = ToolContract(
    name="currency_conversion",
    description="Convert currency from one currency to another",
    parameters={
        "amount": ParameterSchema(ParameterType.NUMBER, "The amount to convert"),
        "fromCurrency": ParameterSchema(
            ParameterType.STRING, "The source currency code (e.g., 'USD')"
        ),
        "toCurrency": ParameterSchema(
            ParameterType.STRING, "The target currency code (e.g., 'EUR')"
        ),
    },
    required=frozenset({"amount", "fromCurrency", "toCurrency"}),
    handler=currency_conversion,
)
