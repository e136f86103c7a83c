"""Narration and portrait collaborators.

The adventure session talks to the language model through two narrow
protocols so that tests and alternative providers can stand in for the
real service:

- NarrationClient: ``open_session(system_instruction, temperature)`` and
  ``converse(handle, text)``.
- PortraitRenderer: ``render_image(prompt)`` returning image bytes or None.

The shipped implementations use the openai SDK against an
OpenAI-compatible endpoint (OpenRouter by default). Chat completions are
stateless, so the conversation handle keeps the ordered history that is
replayed on every turn.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable
from uuid import uuid4

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from onepage_dm.core.config import AIProviderSettings, get_settings
from onepage_dm.core.exceptions import (
    NarrationConnectionError,
    NarrationError,
    NarrationRateLimitError,
    NarrationResponseError,
)
from onepage_dm.core.logging import get_logger


logger = get_logger(__name__)

PROVIDER = "openrouter"


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class NarrationClient(Protocol):
    """The external dungeon master.

    Both operations may raise; the adventure session converts any failure
    into an in-story message.
    """

    def open_session(self, system_instruction: str, temperature: float) -> Any:
        """Open a conversation seeded with a system instruction.

        Returns:
            An opaque conversation handle passed back to ``converse``.
        """
        ...

    def converse(self, conversation: Any, text: str) -> str:
        """Send one player message and return the narrated reply."""
        ...


@runtime_checkable
class PortraitRenderer(Protocol):
    """The external portrait artist."""

    def render_image(self, prompt: str) -> bytes | None:
        """Render a portrait, returning image bytes or None."""
        ...


# =============================================================================
# Conversation Handle
# =============================================================================


@dataclass
class Conversation:
    """History of one conversation with the narration model.

    Attributes:
        system_instruction: Instruction the conversation was opened with.
        temperature: Sampling temperature for every turn.
        messages: Completed exchanges as chat-completion messages.
        conversation_id: Identifier for logging.
    """

    system_instruction: str
    temperature: float
    messages: list[dict[str, str]] = field(default_factory=list)
    conversation_id: str = field(default_factory=lambda: uuid4().hex)

    def to_request(self, text: str) -> list[dict[str, str]]:
        """Build the message list for the next turn."""
        return [
            {"role": "system", "content": self.system_instruction},
            *self.messages,
            {"role": "user", "content": text},
        ]

    def record(self, text: str, reply: str) -> None:
        self.messages.append({"role": "user", "content": text})
        self.messages.append({"role": "assistant", "content": reply})

    @property
    def turn_count(self) -> int:
        return len(self.messages) // 2


# =============================================================================
# OpenRouter Client
# =============================================================================


class _OpenRouterBase:
    """Lazily-built openai client shared by the narrator and the portrait renderer."""

    def __init__(
        self,
        settings: AIProviderSettings | None = None,
        *,
        client: Any = None,
    ) -> None:
        """Initialize the client wrapper.

        Args:
            settings: Provider settings; defaults to the application settings.
            client: Pre-built openai-compatible client, mainly for tests.
        """
        self._settings = settings or get_settings().ai
        self._client = client

    def _get_client(self) -> Any:
        """Get or create the OpenAI client configured for the provider.

        Raises:
            NarrationConnectionError: If no API key is configured.
        """
        if self._client is None:
            from openai import OpenAI

            if not self._settings.has_api_key:
                raise NarrationConnectionError(
                    "Narration API key not configured",
                    provider=PROVIDER,
                    details={"env_var": "ONEPAGE_DM_API_KEY"},
                )

            self._client = OpenAI(
                api_key=self._settings.api_key.get_secret_value(),
                base_url=self._settings.base_url,
                timeout=self._settings.timeout_seconds,
                max_retries=0,
                default_headers={"X-Title": "One Page DM"},
            )

        return self._client


class OpenRouterNarrator(_OpenRouterBase):
    """NarrationClient backed by an OpenAI-compatible chat completion API."""

    def __init__(
        self,
        settings: AIProviderSettings | None = None,
        *,
        client: Any = None,
        retry_wait: Any = None,
    ) -> None:
        """Initialize the narrator.

        Args:
            settings: Provider settings; defaults to the application settings.
            client: Pre-built openai-compatible client, mainly for tests.
            retry_wait: tenacity wait strategy between retries.
        """
        super().__init__(settings, client=client)
        self._retry_wait = retry_wait or wait_exponential(multiplier=1, min=2, max=10)

    @property
    def model(self) -> str:
        return self._settings.narration_model

    def open_session(self, system_instruction: str, temperature: float) -> Conversation:
        """Open a conversation.

        Fails early when the provider is misconfigured, so a session is
        never started against a client that cannot answer.

        Raises:
            NarrationConnectionError: If no API key is configured.
        """
        self._get_client()
        conversation = Conversation(system_instruction=system_instruction, temperature=temperature)
        logger.info(
            "Narration conversation opened",
            model=self.model,
            conversation_id=conversation.conversation_id,
        )
        return conversation

    def converse(self, conversation: Conversation, text: str) -> str:
        """Send one message on an open conversation.

        The exchange is recorded in the conversation only when a reply
        arrives, so a failed turn leaves the history untouched.

        Raises:
            NarrationError: If the request fails after retries.
        """
        reply = self._complete(conversation.to_request(text), conversation.temperature)
        conversation.record(text, reply)
        logger.debug(
            "Narration turn completed",
            conversation_id=conversation.conversation_id,
            turns=conversation.turn_count,
        )
        return reply

    def _complete(self, messages: list[dict[str, str]], temperature: float) -> str:
        from openai import APIConnectionError, APIStatusError, RateLimitError

        client = self._get_client()

        @retry(
            stop=stop_after_attempt(self._settings.max_retries + 1),
            wait=self._retry_wait,
            retry=retry_if_exception_type((NarrationRateLimitError, NarrationConnectionError)),
            reraise=True,
        )
        def _call() -> str:
            try:
                response = client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=self._settings.max_tokens,
                )
            except RateLimitError as exc:
                logger.warning("Rate limited, retrying...", model=self.model)
                raise NarrationRateLimitError(
                    f"Narration rate limit exceeded: {exc}",
                    model=self.model,
                    provider=PROVIDER,
                ) from exc
            except APIConnectionError as exc:
                raise NarrationConnectionError(
                    f"Failed to connect to narration service: {exc}",
                    model=self.model,
                    provider=PROVIDER,
                ) from exc
            except APIStatusError as exc:
                raise NarrationResponseError(
                    f"Narration API error: {exc}",
                    model=self.model,
                    provider=PROVIDER,
                    details={"status_code": exc.status_code},
                ) from exc

            if not response.choices:
                raise NarrationResponseError("Narration reply has no choices", model=self.model)
            content = response.choices[0].message.content
            if not content:
                raise NarrationResponseError("Narration reply is empty", model=self.model)
            return content

        return _call()


class OpenRouterPortraitRenderer(_OpenRouterBase):
    """PortraitRenderer backed by an image-capable chat model.

    Every failure, including a missing API key, yields None.
    """

    @property
    def model(self) -> str:
        return self._settings.portrait_model

    def render_image(self, prompt: str) -> bytes | None:
        from openai import OpenAIError

        try:
            client = self._get_client()
            response = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                extra_body={"modalities": ["image", "text"]},
            )
            return _extract_image(response)
        except (NarrationError, OpenAIError, ValueError) as exc:
            logger.warning("Portrait generation failed", model=self.model, error=str(exc))
            return None


def _extract_image(response: Any) -> bytes | None:
    """Pull the first inline image out of a chat completion.

    Image-capable models on OpenRouter return ``message.images`` entries
    holding a base64 data URL.
    """
    choices = getattr(response, "choices", None)
    if not choices:
        return None
    images = getattr(choices[0].message, "images", None) or []
    for image in images:
        entry = image.get("image_url") if isinstance(image, dict) else getattr(image, "image_url", None)
        url = entry.get("url") if isinstance(entry, dict) else getattr(entry, "url", None)
        if isinstance(url, str) and url.startswith("data:") and "," in url:
            return base64.b64decode(url.split(",", 1)[1], validate=True)
    logger.info("Portrait reply held no inline image", images=len(images))
    return None


__all__ = [
    "NarrationClient",
    "PortraitRenderer",
    "Conversation",
    "OpenRouterNarrator",
    "OpenRouterPortraitRenderer",
]
