"""HTTP client for a local Ollama server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chatbot.config import settings
from chatbot.ports import LLMPort

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)


class OllamaError(Exception):
    """Ollama request failed or returned an unusable body."""


class OllamaClient(LLMPort):
    """``LLMPort`` backed by Ollama's ``/api/generate`` endpoint."""

    def __init__(
        self,
        *,
        url: str | None = None,
        model: str | None = None,
        enabled: bool | None = None,
        timeout: float | None = None,
        connect_timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = (url or settings.ollama_url).rstrip("/")
        self.model = model or settings.ollama_model
        self.enabled = settings.ollama_enabled if enabled is None else enabled
        read_timeout = timeout if timeout is not None else settings.ollama_timeout
        connect = connect_timeout if connect_timeout is not None else settings.ollama_connect_timeout

        if client is None:
            import httpx

            self._client = httpx.Client(timeout=httpx.Timeout(read_timeout, connect=connect))
            self._owns_client = True
        else:
            self._client = client
            self._owns_client = False

        logger.info(
            "Ollama client initialized - URL: %s, Model: %s, Enabled: %s",
            self.url,
            self.model,
            self.enabled,
        )

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            self._client.close()

    def __enter__(self) -> OllamaClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def model_name(self) -> str:
        return self.model

    def is_available(self) -> bool:
        if not self.enabled:
            return False

        import httpx

        try:
            response = self._client.get(f"{self.url}/api/tags")
        except httpx.HTTPError as exc:
            logger.debug("Ollama not available: %s", exc)
            return False
        return response.is_success

    def generate(self, system_prompt: str, user_message: str, history: str = "") -> str:
        if not self.enabled:
            raise OllamaError("Ollama is disabled by configuration")

        import httpx

        payload = {
            "model": self.model,
            "prompt": self._build_prompt(user_message, history),
            "system": system_prompt,
            "stream": False,
        }
        try:
            response = self._client.post(f"{self.url}/api/generate", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            raise OllamaError(f"Failed to communicate with Ollama: {exc}") from exc
        except ValueError as exc:
            raise OllamaError("Ollama returned a non-JSON body") from exc

        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise OllamaError("Ollama returned an empty response")

        logger.debug("Ollama response received (length: %d chars)", len(text))
        return text.strip()

    @staticmethod
    def _build_prompt(user_message: str, history: str) -> str:
        if not history:
            return user_message
        return f"{history}\nNouveau message utilisateur: {user_message}"
