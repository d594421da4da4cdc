"""Current weather lookup via the OpenWeatherMap API."""

import logging
from typing import Any

import httpx

from toolloop_server.errors import ToolExecutionError
from toolloop_server.tools.types import ParameterSchema, ParameterType, ToolContract

logger = logging.getLogger(__name__)

TOOL_NAME = "get_current_weather"

_UNITS = {"celsius": "metric", "fahrenheit": "imperial"}


class WeatherLookup:
    """Handler for the weather tool.

    The HTTP client is shared across requests and owned by the application
    lifespan; this class only holds a reference to it.

    Attributes:
        http_client: Shared httpx.AsyncClient
        api_key: OpenWeatherMap API key, or None if not configured
        base_url: API base URL (e.g., "https://api.openweathermap.org/data/2.5")
        timeout_seconds: Timeout for the outbound request
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str | None,
        base_url: str,
        timeout_seconds: float = 5.0,
    ) -> None:
        self.http_client = http_client
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    async def fetch(self, location: str, unit: str = "celsius") -> dict[str, Any]:
        if not self.api_key:
            raise ToolExecutionError(TOOL_NAME, "weather API key is not configured")

        try:
            response = await self.http_client.get(
                f"{self.base_url}/weather",
                params={"q": location, "appid": self.api_key, "units": _UNITS[unit]},
                timeout=self.timeout_seconds,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Weather request for {location!r} failed: {e}")
            raise ToolExecutionError(TOOL_NAME, f"weather service unreachable: {e}")

        if response.status_code == 404:
            raise ToolExecutionError(TOOL_NAME, f"unknown location: {location}")
        if response.is_error:
            raise ToolExecutionError(
                TOOL_NAME, f"weather service returned HTTP {response.status_code}"
            )

        try:
            data = response.json()
            return {
                "location": data["name"],
                "temperature": data["main"]["temp"],
                "unit": unit,
            }
        except (ValueError, KeyError, TypeError) as e:
            raise ToolExecutionError(
                TOOL_NAME, f"malformed weather response: {e!r}"
            ) from e


def make_weather_tool(lookup: WeatherLookup) -> ToolContract:
    """Create the weather tool contract around a configured lookup."""
    return ToolContract(
        name=TOOL_NAME,
        description="Get the current weather in a given location",
        parameters={
            "location": ParameterSchema(
                ParameterType.STRING,
                "The city and state, e.g. San Francisco, CA",
            ),
            "unit": ParameterSchema(
                ParameterType.ENUM,
                "Temperature unit",
                enum=("celsius", "fahrenheit"),
            ),
        },
        required=frozenset({"location"}),
        handler=lookup.fetch,
    )
