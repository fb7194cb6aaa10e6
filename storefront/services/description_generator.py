# storefront/services/description_generator.py

"""AI-assisted product descriptions via a hosted text-generation model."""

import asyncio
import logging
from typing import Any

from curl_cffi import requests as curl_requests

from storefront.config.settings import Settings
from storefront.errors import (
    BusyError,
    ConfigurationError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger("storefront.generator")

_STATUS_MESSAGES: dict[int, str] = {
    429: "Rate limit exceeded. Please wait and try again.",
    503: "Model is loading. Please try again in a few seconds.",
}
_GENERIC_FAILURE = "Failed to generate description. Please try again later."


def build_prompt(name: str, category: str) -> str:
    """Prompt asking for a short marketing description."""
    return (
        f"Create a concise product description (50-70 words) for a "
        f'{category} product named "{name}". '
        f"Highlight key features and appeal: "
    )


class DescriptionGenerator:
    """Calls the hosted model, one request at a time."""

    def __init__(self) -> None:
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self.is_generating: bool = False

    def _post(self, api_key: str, prompt: str) -> Any:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        payload = {
            "inputs": prompt,
            "parameters": dict(self.settings.GENERATION_PARAMETERS),
        }
        try:
            resp = self.session.post(
                self.settings.HF_MODEL_URL,
                headers=headers,
                json=payload,
                timeout=self.settings.GENERATION_TIMEOUT,
            )
        except Exception as exc:
            logger.error("Generation request failed: %s", exc, exc_info=True)
            raise TransportError(_GENERIC_FAILURE) from exc

        if resp.status_code != 200:
            logger.warning(
                "Generation endpoint returned HTTP %d: %s",
                resp.status_code,
                resp.text[:200],
            )
            raise TransportError(
                _STATUS_MESSAGES.get(resp.status_code, _GENERIC_FAILURE),
                status=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(_GENERIC_FAILURE, status=200) from exc

    async def generate(self, name: str, category: str) -> str:
        """Return a generated description for the given product.

        Raises ``ValidationError`` without a name and category,
        ``ConfigurationError`` when no API key is configured (no request
        is made) and ``BusyError`` while another generation is running.
        """
        if not name.strip() or not category.strip():
            raise ValidationError(
                "Please enter a product name and category first!"
            )
        api_key = self.settings.hf_api_key()
        if api_key is None:
            logger.error("Missing %s in environment", self.settings.HF_API_KEY_ENV)
            raise ConfigurationError(
                f"Text generation API key is missing. Please configure "
                f"{self.settings.HF_API_KEY_ENV} in .env!"
            )
        if self.is_generating:
            raise BusyError("A description is already being generated")

        self.is_generating = True
        try:
            data = await asyncio.to_thread(
                self._post, api_key, build_prompt(name, category)
            )
        finally:
            self.is_generating = False

        try:
            text = str(data[0]["generated_text"]).strip()
        except (IndexError, KeyError, TypeError) as exc:
            logger.error("Unexpected generation response: %r", data)
            raise TransportError(_GENERIC_FAILURE, status=200) from exc
        logger.info("Generated %d-char description for '%s'", len(text), name)
        return text
