"""Tests for the language-model gateway using a stub completions client."""

import httpx
import openai
import pytest

from concierge.config import ModelConfig
from concierge.errors import ApiError, MalformedResponseError
from concierge.gateway import LanguageModelGateway, build_system_prompt
from concierge.schemas.conversation_schema import ChatMessage, ChatRole
from tests.conftest import StubCompletions, make_stub_client

_REQUEST = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")


def _gateway(completions: StubCompletions, history_turns: int = 6) -> LanguageModelGateway:
    return LanguageModelGateway(
        client=make_stub_client(completions),
        config=ModelConfig(api_key="test-key"),
        history_turns=history_turns,
    )


def _history(turns: int) -> list[ChatMessage]:
    messages = []
    for i in range(turns):
        messages.append(ChatMessage(role=ChatRole.USER, content=f"question {i}"))
        messages.append(ChatMessage(role=ChatRole.ASSISTANT, content=f"answer {i}"))
    return messages


class TestSystemPrompt:
    def test_context_blocks_inserted(self):
        prompt = build_system_prompt("COMPANY: Test Co", "PROPERTY: Test Villa")
        assert "COMPANY: Test Co" in prompt
        assert "PROPERTY: Test Villa" in prompt
        assert "{company_context}" not in prompt


class TestComplete:
    @pytest.mark.asyncio
    async def test_returns_stripped_text(self):
        completions = StubCompletions(content="  We have three villas in Karen.  ")
        text = await _gateway(completions).complete("villas?", "system")
        assert text == "We have three villas in Karen."

    @pytest.mark.asyncio
    async def test_request_shape(self):
        completions = StubCompletions()
        await _gateway(completions).complete("hello", "system", context_text="EXTRA")
        request = completions.requests[0]
        assert request["messages"][0]["role"] == "system"
        assert "ADDITIONAL CONTEXT:\nEXTRA" in request["messages"][0]["content"]
        assert request["messages"][-1] == {"role": "user", "content": "hello"}
        assert request["top_p"] == 0.9

    @pytest.mark.asyncio
    async def test_history_capped_to_recent_turns(self):
        completions = StubCompletions()
        await _gateway(completions, history_turns=6).complete("now", "system", history=_history(10))
        messages = completions.requests[0]["messages"]
        # system + 6 turns of 2 messages + the new user message
        assert len(messages) == 14
        assert messages[1]["content"] == "question 4"

    @pytest.mark.asyncio
    async def test_status_error_maps_to_api_error(self):
        response = httpx.Response(503, request=_REQUEST)
        error = openai.APIStatusError("unavailable", response=response, body=None)
        with pytest.raises(ApiError) as exc_info:
            await _gateway(StubCompletions(error=error)).complete("hi", "system")
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_timeout_maps_to_api_error(self):
        error = openai.APITimeoutError(request=_REQUEST)
        with pytest.raises(ApiError):
            await _gateway(StubCompletions(error=error)).complete("hi", "system")

    @pytest.mark.asyncio
    async def test_empty_choices(self):
        with pytest.raises(ApiError, match="No choices"):
            await _gateway(StubCompletions(empty=True)).complete("hi", "system")

    @pytest.mark.asyncio
    async def test_single_attempt_per_call(self):
        completions = StubCompletions(error=openai.APITimeoutError(request=_REQUEST))
        with pytest.raises(ApiError):
            await _gateway(completions).complete("hi", "system")
        assert len(completions.requests) == 1


class TestResponseGuardrails:
    @pytest.mark.asyncio
    async def test_no_latin_text_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            await _gateway(StubCompletions(content="12345 !!!")).complete("hi", "system")

    @pytest.mark.asyncio
    async def test_excessive_non_english_is_malformed(self):
        garbled = "ok " + "сдаётся дом в Карен " * 5
        with pytest.raises(MalformedResponseError):
            await _gateway(StubCompletions(content=garbled)).complete("hi", "system")

    @pytest.mark.asyncio
    async def test_persona_break_only_warns(self):
        text = "As an AI I can say the Karen villa is lovely."
        assert await _gateway(StubCompletions(content=text)).complete("hi", "system") == text


class TestOffline:
    @pytest.mark.asyncio
    async def test_no_key_raises_without_network(self):
        gateway = LanguageModelGateway(config=ModelConfig(api_key=""))
        assert not gateway.available
        with pytest.raises(ApiError):
            await gateway.complete("hi", "system")

    def test_client_built_without_retries(self):
        gateway = LanguageModelGateway(config=ModelConfig(api_key="test-key", timeout_seconds=7.5))
        assert gateway.available
        assert gateway._client.max_retries == 0
        assert gateway._client.timeout == 7.5


class TestConnectionCheck:
    @pytest.mark.asyncio
    async def test_success(self):
        gateway = _gateway(StubCompletions(content="Connection successful"))
        assert await gateway.check_connection() is True

    @pytest.mark.asyncio
    async def test_unexpected_reply(self):
        gateway = _gateway(StubCompletions(content="Hello!"))
        assert await gateway.check_connection() is False

    @pytest.mark.asyncio
    async def test_failure_never_raises(self):
        gateway = LanguageModelGateway(config=ModelConfig(api_key=""))
        assert await gateway.check_connection() is False
