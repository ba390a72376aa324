"""Runtime configuration read from the environment (and a .env file)."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_PROVIDER = "openai"
DEFAULT_OPENAI_MODEL = "gpt-4.1"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_TEMPERATURE = 0.1
DEFAULT_MAX_TOKENS = 2048


@dataclass
class Settings:
    provider: str = DEFAULT_PROVIDER
    model: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS


def load_settings(env_file: Optional[str] = None, **overrides) -> Settings:
    """Build Settings from GRANTSCOUT_* variables and provider API keys.

    Keyword overrides (e.g. from CLI flags) win over the environment when
    they are not None.
    """
    load_dotenv(env_file)

    try:
        temperature = float(os.getenv("GRANTSCOUT_TEMPERATURE", DEFAULT_TEMPERATURE))
        max_tokens = int(os.getenv("GRANTSCOUT_MAX_TOKENS", DEFAULT_MAX_TOKENS))
    except ValueError as e:
        raise ValueError(f"Invalid GRANTSCOUT_* setting: {e}") from e

    settings = Settings(
        provider=os.getenv("GRANTSCOUT_PROVIDER", DEFAULT_PROVIDER).strip().lower(),
        model=os.getenv("GRANTSCOUT_MODEL") or None,
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        gemini_api_key=os.getenv("GEMINI_API_KEY"),
        temperature=temperature,
        max_tokens=max_tokens,
    )

    for key, value in overrides.items():
        if not hasattr(settings, key):
            raise TypeError(f"Unknown setting '{key}'")
        if value is not None:
            setattr(settings, key, value)
    return settings
