"""
Language-model gateway over an OpenAI-compatible chat completions API.

A single call per request: the client is built with ``max_retries=0`` and
an explicit timeout, so a slow or failing provider surfaces immediately as
an ``ApiError`` and the calling handler degrades to local data. Completions
that fail the response guardrails raise ``MalformedResponseError``.

Usage:
    gateway = LanguageModelGateway()
    text = await gateway.generate(message, company_context, property_data, history)
"""

import logging
from typing import Optional

from openai import APIError, APIStatusError, AsyncOpenAI

from concierge.config import ModelConfig, settings
from concierge.conversation.guardrails import GuardrailPipeline
from concierge.errors import ApiError, GatewayError, MalformedResponseError
from concierge.prompts.system_prompts import (
    CONNECTION_TEST_MESSAGE,
    CONNECTION_TEST_PROMPT,
    SYSTEM_PROMPT_TEMPLATE,
)
from concierge.schemas.conversation_schema import ChatMessage

logger = logging.getLogger(__name__)

TOP_P = 0.9
FREQUENCY_PENALTY = 0.1
PRESENCE_PENALTY = 0.1
CONNECTION_TEST_MAX_TOKENS = 50


def build_system_prompt(company_context: str, property_data: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(
        company_context=company_context.strip(),
        property_data=property_data.strip(),
    )


def _build_client(config: ModelConfig) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=config.api_key,
        base_url=config.base_url,
        max_retries=0,
        timeout=config.timeout_seconds,
        default_headers={
            "HTTP-Referer": config.referer,
            "X-Title": config.app_title,
        },
    )


class LanguageModelGateway:
    """
    Thin async wrapper around the completions endpoint.

    When no API key is configured and no client is injected, every call
    raises ``ApiError`` without touching the network, which keeps the
    assistant usable offline on its local fallbacks.
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        config: ModelConfig = settings.model,
        history_turns: int = settings.routing.history_turns,
    ) -> None:
        self._config = config
        self._history_turns = history_turns
        self._guardrails = GuardrailPipeline()
        if client is not None:
            self._client: Optional[AsyncOpenAI] = client
        elif config.api_key:
            self._client = _build_client(config)
        else:
            self._client = None
            logger.warning("OPENROUTER_API_KEY is not set; language model responses are disabled")

    @property
    def available(self) -> bool:
        return self._client is not None

    def _history_messages(self, history: Optional[list[ChatMessage]]) -> list[dict[str, str]]:
        if not history:
            return []
        recent = history[-2 * self._history_turns:]
        return [{"role": m.role.value, "content": m.content} for m in recent]

    async def complete(
        self,
        user_message: str,
        system_prompt: str,
        context_text: str = "",
        history: Optional[list[ChatMessage]] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Request one completion and return its text.

        Args:
            user_message: The visitor's message for this turn.
            system_prompt: Instructions, usually from ``build_system_prompt``.
            context_text: Extra context appended to the system prompt.
            history: Prior turns; only the most recent ones are sent.
            max_tokens: Overrides the configured completion length.

        Raises:
            ApiError: On transport errors, timeouts, error statuses or empty choices.
            MalformedResponseError: When the text fails the response guardrails.
        """
        if self._client is None:
            raise ApiError("Language model API key is not configured")

        system_content = system_prompt
        if context_text:
            system_content = f"{system_prompt}\n\nADDITIONAL CONTEXT:\n{context_text}"
        messages = [
            {"role": "system", "content": system_content},
            *self._history_messages(history),
            {"role": "user", "content": user_message},
        ]

        logger.debug(
            "Completion request: model=%s, system=%d chars, messages=%d",
            self._config.llm_model, len(system_content), len(messages),
        )
        try:
            response = await self._client.chat.completions.create(
                model=self._config.llm_model,
                messages=messages,
                max_tokens=max_tokens or self._config.max_tokens,
                temperature=self._config.llm_temperature,
                top_p=TOP_P,
                frequency_penalty=FREQUENCY_PENALTY,
                presence_penalty=PRESENCE_PENALTY,
            )
        except APIStatusError as exc:
            raise ApiError(f"Completion API error: {exc.status_code}", status_code=exc.status_code) from exc
        except APIError as exc:
            raise ApiError(f"Completion request failed: {exc}") from exc

        if not response.choices:
            raise ApiError("No choices in completion response")

        text = (response.choices[0].message.content or "").strip()
        for violation in self._guardrails.check_model_response(text):
            if violation.severity == "block":
                raise MalformedResponseError(violation.message or "Response failed guardrails")
            logger.warning("Response guardrail warning: %s", violation.message)
        return text

    async def generate(
        self,
        user_message: str,
        company_context: str,
        property_data: str,
        history: Optional[list[ChatMessage]] = None,
    ) -> str:
        """Complete with the standard assistant prompt around the given context blocks."""
        return await self.complete(
            user_message,
            build_system_prompt(company_context, property_data),
            history=history,
        )

    async def check_connection(self) -> bool:
        """Round-trip a fixed prompt. Never raises."""
        try:
            reply = await self.complete(
                CONNECTION_TEST_MESSAGE,
                CONNECTION_TEST_PROMPT,
                max_tokens=CONNECTION_TEST_MAX_TOKENS,
            )
        except GatewayError as exc:
            logger.warning("Language model connection test failed: %s", exc)
            return False
        return "connection successful" in reply.lower()
