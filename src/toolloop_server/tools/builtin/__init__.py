"""The builtin tool catalog.

Pure tools are module-level contracts. The weather tool needs an HTTP client
and credentials, so it is built from a configured ``WeatherLookup``.
"""

from toolloop_server.tools.builtin.arithmetic import (
    EVEN_ODD_CHECK,
    PRIME_NUMBER_CHECK,
    SUM_OF_TWO_NUMBERS,
)
from toolloop_server.tools.builtin.conversion import (
    CURRENCY_CONVERSION,
    UNIT_CONVERSION,
)
from toolloop_server.tools.builtin.weather import WeatherLookup, make_weather_tool
from toolloop_server.tools.types import ToolContract


def builtin_tools(weather: WeatherLookup) -> list[ToolContract]:
    """Return the builtin catalog in the order it is offered to the model."""
    return [
        SUM_OF_TWO_NUMBERS,
        EVEN_ODD_CHECK,
        PRIME_NUMBER_CHECK,
        make_weather_tool(weather),
        UNIT_CONVERSION,
        CURRENCY_CONVERSION,
    ]


__all__ = [
    "CURRENCY_CONVERSION",
    "EVEN_ODD_CHECK",
    "PRIME_NUMBER_CHECK",
    "SUM_OF_TWO_NUMBERS",
    "UNIT_CONVERSION",
    "WeatherLookup",
    "builtin_tools",
    "make_weather_tool",
]
