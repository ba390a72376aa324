"""Chat-completion gateways.

A gateway takes a system instruction and a user prompt and returns the raw
reply text. Gateways are constructed explicitly and handed to whatever needs
them; nothing in this package keeps a module-level client.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional, Protocol

from .config import DEFAULT_GEMINI_MODEL, DEFAULT_OPENAI_MODEL, Settings

logger = logging.getLogger(__name__)


class CompletionFailure(Exception):
    """The completion service errored or returned no content."""


@dataclass
class CompletionOptions:
    temperature: float = 0.1
    max_tokens: int = 2048
    top_p: float = 1.0


class CompletionGateway(Protocol):
    async def complete(self, system_instruction: str, user_prompt: str,
                       options: Optional[CompletionOptions] = None) -> str:
        ...


def _require_text(content: Optional[str], provider: str) -> str:
    if content is None or not content.strip():
        logger.error(f"{provider} returned no content")
        raise CompletionFailure(f"No response from {provider}")
    return content


class OpenAIGateway:
    """Completion gateway backed by the OpenAI chat completions API."""

    def __init__(self, model: str = DEFAULT_OPENAI_MODEL, api_key: str = None, client=None):
        self.model = model
        if client is None:
            api_key = api_key or os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise ValueError("OPENAI_API_KEY not found in environment")

            from openai import OpenAI
            client = OpenAI(api_key=api_key)
        self.client = client

    async def complete(self, system_instruction: str, user_prompt: str,
                       options: Optional[CompletionOptions] = None) -> str:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            None, self._complete_sync, system_instruction, user_prompt, options or CompletionOptions()
        )

    def _complete_sync(self, system_instruction: str, user_prompt: str,
                       options: CompletionOptions) -> str:
        """Synchronous completion call."""
        logger.debug(f"OpenAI request ({self.model}): {user_prompt}")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=options.temperature,
                max_completion_tokens=options.max_tokens,
                top_p=options.top_p,
            )
        except Exception as e:
            logger.error(f"OpenAI API call failed: {e}")
            raise CompletionFailure(f"OpenAI request failed: {e}") from e

        if not response.choices:
            return _require_text(None, "OpenAI")
        message = response.choices[0].message
        if getattr(message, "refusal", None):
            logger.warning(f"OpenAI refused to respond: {message.refusal}")
        return _require_text(message.content, "OpenAI")


class GeminiGateway:
    """Completion gateway backed by Google Gemini."""

    def __init__(self, model: str = DEFAULT_GEMINI_MODEL, api_key: str = None, client=None):
        self.model = model
        if client is None:
            api_key = api_key or os.getenv("GEMINI_API_KEY")
            if not api_key:
                raise ValueError("GEMINI_API_KEY not found in environment")

            from google import genai
            client = genai.Client(api_key=api_key)
        self.client = client

    async def complete(self, system_instruction: str, user_prompt: str,
                       options: Optional[CompletionOptions] = None) -> str:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            None, self._complete_sync, system_instruction, user_prompt, options or CompletionOptions()
        )

    def _complete_sync(self, system_instruction: str, user_prompt: str,
                       options: CompletionOptions) -> str:
        """Synchronous completion call."""
        from google.genai import types

        logger.debug(f"Gemini request ({self.model}): {user_prompt}")
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=[user_prompt],
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    temperature=options.temperature,
                    max_output_tokens=options.max_tokens,
                    top_p=options.top_p,
                ),
            )
        except Exception as e:
            logger.error(f"Gemini API call failed: {e}")
            raise CompletionFailure(f"Gemini request failed: {e}") from e

        return _require_text(response.text, "Gemini")


def build_gateway(settings: Settings) -> CompletionGateway:
    """Create the gateway named by ``settings.provider``."""
    if settings.provider == "openai":
        return OpenAIGateway(model=settings.model or DEFAULT_OPENAI_MODEL,
                             api_key=settings.openai_api_key)
    if settings.provider == "gemini":
        return GeminiGateway(model=settings.model or DEFAULT_GEMINI_MODEL,
                             api_key=settings.gemini_api_key)
    raise ValueError(f"Unsupported provider '{settings.provider}'. Use 'openai' or 'gemini'.")


def options_from_settings(settings: Settings) -> CompletionOptions:
    return CompletionOptions(temperature=settings.temperature, max_tokens=settings.max_tokens)
