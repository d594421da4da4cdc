"""Configuration module for toolloop-server using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ToolLoopSettings(BaseSettings):
    """Main configuration settings for toolloop-server.

    All settings can be overridden via environment variables with the TOOLLOOP_
    prefix, or from a ``.env`` file in the working directory.
    For example, TOOLLOOP_OLLAMA_HOST will override the ollama_host setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_host: str = "http://localhost:11434"
    model: str = "llama3.1:8b"

    # Conversation loop
    max_iterations: int = Field(default=10, ge=1)
    system_prompt: str | None = None

    # Tool execution
    tool_timeout_seconds: float = Field(default=10.0, gt=0)

    # Weather tool (OpenWeatherMap)
    weather_api_key: str | None = None
    weather_base_url: str = "https://api.openweathermap.org/data/2.5"
    weather_timeout_seconds: float = Field(default=5.0, gt=0)

    # Client disconnect detection for /ask
    disconnect_poll_interval: float = Field(default=0.5, gt=0)

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TOOLLOOP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
