"""Shared test fixtures and helpers."""

from types import SimpleNamespace
from typing import Optional

import pytest

from concierge.config import ModelConfig
from concierge.conversation.state_machine import DialogueStateMachine
from concierge.errors import ApiError, DomainDataUnavailable
from concierge.gateway import LanguageModelGateway
from concierge.schemas.conversation_schema import (
    DialogueState,
    DialogueStep,
    ViewingDetails,
)
from concierge.schemas.property_schema import Agent, Property, Task
from concierge.tools.notifications import AgentNotifier
from concierge.tools.portfolio import InMemoryDataProvider, PropertyDataProvider

OFFLINE_MODEL = ModelConfig(api_key="")


class FakeGateway(LanguageModelGateway):
    """Gateway stand-in that returns a canned reply or raises a canned error."""

    def __init__(self, reply: str = "Here is what I found for you.", error: Optional[Exception] = None) -> None:
        super().__init__(config=OFFLINE_MODEL)
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    async def complete(self, user_message, system_prompt, context_text="", history=None, max_tokens=None):
        self.calls.append({
            "user_message": user_message,
            "system_prompt": system_prompt,
            "history": list(history or []),
        })
        if self.error is not None:
            raise self.error
        return self.reply


class FailingProvider(PropertyDataProvider):
    """Provider whose backing store is always down."""

    async def get_all_properties(self) -> list[Property]:
        raise DomainDataUnavailable("database offline")

    async def get_all_agents(self) -> list[Agent]:
        raise DomainDataUnavailable("database offline")

    async def get_all_tasks(self) -> list[Task]:
        raise DomainDataUnavailable("database offline")


class StubCompletions:
    """Minimal ``client.chat.completions`` replacement for gateway tests."""

    def __init__(self, content: Optional[str] = "Hello there.", error: Optional[Exception] = None,
                 empty: bool = False) -> None:
        self.content = content
        self.error = error
        self.empty = empty
        self.requests: list[dict] = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.empty:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_stub_client(completions: StubCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def make_property(**overrides) -> Property:
    fields = {
        "id": 99,
        "title": "Test Villa",
        "description": "A test property.",
        "price": 50_000_000,
        "location": "Karen, Nairobi",
        "bedrooms": 3,
    }
    fields.update(overrides)
    return Property(**fields)


@pytest.fixture
def provider():
    return InMemoryDataProvider.from_fixture()


@pytest.fixture
def failing_provider():
    return FailingProvider()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def offline_gateway():
    return FakeGateway(error=ApiError("service unavailable", status_code=503))


@pytest.fixture
def notifier():
    n = AgentNotifier()
    yield n
    n.reset()


@pytest.fixture
def state_machine():
    return DialogueStateMachine()


@pytest.fixture
def karen_villa(provider):
    return provider._properties[0]


@pytest.fixture
def collecting_state(karen_villa):
    return DialogueState(
        step=DialogueStep.COLLECTING_DETAILS,
        property_context=karen_villa,
        viewing_details=ViewingDetails(name="Jane", contact="jane@x.com"),
    )


@pytest.fixture
def confirming_state(karen_villa):
    return DialogueState(
        step=DialogueStep.CONFIRMING_BOOKING,
        property_context=karen_villa,
        viewing_details=ViewingDetails(
            name="Jane Wanjiku",
            contact="jane@example.com",
            date="Saturday",
            time="10am",
        ),
    )
