"""
Shared plumbing for the concierge agents.

Every agent receives the same ``AgentContext`` bundle of collaborators and
returns a ``TurnResult``. The helpers here cover the parts every handler
repeats: calling the gateway with the session history, moving the dialogue
to ``general_chat``, and the static contact answer used when domain data
cannot be read at all.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from concierge.conversation.state_machine import DialogueStateMachine, TransitionTrigger
from concierge.gateway import LanguageModelGateway
from concierge.prompts.prompt_templates import render_contact_fallback
from concierge.schemas.conversation_schema import DialogueState, Route, TurnResult
from concierge.tools.knowledge_base import KnowledgeBase
from concierge.tools.matcher import PropertyMatcher
from concierge.tools.notifications import ViewingNotifier
from concierge.tools.portfolio import PropertyDataProvider


@dataclass
class AgentContext:
    """Collaborators shared by all agents for the lifetime of an orchestrator."""

    provider: PropertyDataProvider
    gateway: LanguageModelGateway
    matcher: PropertyMatcher
    knowledge_base: KnowledgeBase = field(default_factory=KnowledgeBase)
    notifier: Optional[ViewingNotifier] = None
    state_machine: DialogueStateMachine = field(default_factory=DialogueStateMachine)


class BaseAgent:
    """Base class for route handlers."""

    def __init__(self, context: AgentContext) -> None:
        self.ctx = context

    async def _generate(
        self,
        message: str,
        state: DialogueState,
        company_context: str,
        property_data: str,
    ) -> str:
        return await self.ctx.gateway.generate(message, company_context, property_data, state.history)

    def _converse(self, state: DialogueState, **updates: Any) -> DialogueState:
        return self.ctx.state_machine.transition(state, TransitionTrigger.CONVERSED, **updates)

    def _unavailable(self, state: DialogueState, route: Route, topic: str) -> TurnResult:
        return TurnResult(
            response_text=render_contact_fallback(topic),
            new_state=state,
            route=route,
        )
