"""
Configuration for the Runway tools.

Values are read from the environment, after loading an optional .env file.
Only the API key is required; the other values are forwarded to the vendor
client when they are set.
"""

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

API_KEY_ENV = "RUNWAY_API_KEY"


class RunwayConfig:
    """Configuration class for the Runway tools."""

    def __init__(self, env_file: Optional[str] = ".env", **overrides: Any):
        """
        Initialize configuration.

        Args:
            env_file: Path to the .env file to load. None skips loading.
            **overrides: Explicit values that take precedence over the environment
                (api_key, base_url, timeout, max_retries).
        """
        if env_file:
            load_dotenv(env_file)

        self.api_key: Optional[str] = overrides.get("api_key", os.getenv(API_KEY_ENV))
        self.base_url: Optional[str] = overrides.get("base_url", os.getenv("RUNWAY_BASE_URL"))
        self.timeout: Optional[float] = _optional_number(
            overrides.get("timeout", os.getenv("RUNWAY_TIMEOUT")), float, "RUNWAY_TIMEOUT"
        )
        self.max_retries: Optional[int] = _optional_number(
            overrides.get("max_retries", os.getenv("RUNWAY_MAX_RETRIES")), int, "RUNWAY_MAX_RETRIES"
        )

    def validate_api_keys(self) -> Dict[str, bool]:
        """
        Validate that required API keys are present.

        Returns:
            Dictionary mapping API name to availability status
        """
        return {"runway": bool(self.api_key)}

    def get_missing_keys(self) -> list[str]:
        available = self.validate_api_keys()
        return [key for key, is_available in available.items() if not is_available]

    def client_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for the vendor client. Unset options are left to the SDK defaults."""
        kwargs: Dict[str, Any] = {"api_key": self.api_key}
        if self.base_url:
            kwargs["base_url"] = self.base_url
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        if self.max_retries is not None:
            kwargs["max_retries"] = self.max_retries
        return kwargs


def _optional_number(value: Any, cast: type, name: str):
    if value is None or value == "":
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a valid {cast.__name__}, got '{value}'")
