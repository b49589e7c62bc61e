"""Configuration module for loading project settings and environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

API_KEY_ENV = "FINANCIAL_DATASETS_API_KEY"
DEFAULT_BASE_URL = "https://api.financialdatasets.ai"


def load_config(config_path: str | Path = "config.yaml") -> Dict[str, Any]:
    """
    Load configuration from the specified YAML file.

    Args:
        config_path (str | Path): Path to the configuration file. Defaults to "config.yaml".

    Returns:
        Dict[str, Any]: A dictionary containing the configuration settings.
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found at {config_path}")

    with open(config_file, "r", encoding="utf-8") as file:
        config_data = yaml.safe_load(file)

    if not config_data:
        raise ValueError(f"Configuration file {config_path} is empty or invalid.")

    return config_data


def resolve_api_key(explicit: Optional[str] = None) -> Optional[str]:
    """
    Return the API key to send with each request.

    An explicit, non-empty key wins; otherwise ``FINANCIAL_DATASETS_API_KEY`` is read
    from the environment. ``None`` means requests go out unauthenticated.
    """
    if explicit:
        return explicit
    return os.getenv(API_KEY_ENV) or None


@dataclass
class Settings:
    """Typed view over the ``api`` and ``output_dir`` sections of config.yaml."""

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 60.0
    backoff_step_seconds: float = 30.0
    output_dir: str = "output"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Settings":
        """
        Build settings from a parsed config dict, falling back to defaults per key.

        Args:
            config (Dict[str, Any]): Result of :func:`load_config`.

        Returns:
            Settings: The populated settings.
        """
        api = config.get("api") or {}
        defaults = cls()
        return cls(
            base_url=str(api.get("base_url", defaults.base_url)).rstrip("/"),
            timeout_seconds=float(api.get("timeout_seconds", defaults.timeout_seconds)),
            max_retries=int(api.get("max_retries", defaults.max_retries)),
            backoff_base_seconds=float(api.get("backoff_base_seconds", defaults.backoff_base_seconds)),
            backoff_step_seconds=float(api.get("backoff_step_seconds", defaults.backoff_step_seconds)),
            output_dir=config.get("output_dir", defaults.output_dir),
        )
