"""
Turn orchestrator: routes each visitor message to one handler.

A booking already in flight is honoured first: while confirming, every
reply goes to the confirmation gate; while collecting details, a message
that supplies a viewing slot, or any reply once every slot is filled, goes
back to the viewing agent. Everything
else runs down ``ROUTING_RULES`` in order and the first matching rule
wins. The last rule always matches.

Usage:
    orchestrator = Orchestrator(InMemoryDataProvider.from_fixture())
    result = await orchestrator.handle("I need a 3 bedroom house in Karen")
    result = await orchestrator.handle("Can I view it?", result.new_state)
"""

import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from concierge.agents.base import AgentContext
from concierge.agents.registry import create_agents
from concierge.config import settings
from concierge.conversation.extractor import KNOWN_LOCATIONS, classify, extract_bare_name
from concierge.conversation.slot_manager import ViewingSlots
from concierge.gateway import LanguageModelGateway
from concierge.logging_context import get_session_logger, set_session_id
from concierge.prompts.prompt_templates import render_error
from concierge.schemas.conversation_schema import (
    ChatMessage,
    ChatRole,
    DialogueState,
    DialogueStep,
    Intent,
    IntentType,
    Route,
    TurnResult,
)
from concierge.tools.knowledge_base import KnowledgeBase
from concierge.tools.matcher import PropertyMatcher
from concierge.tools.notifications import ViewingNotifier
from concierge.tools.portfolio import PropertyDataProvider

logger = get_session_logger(__name__)

# ------------------------------------------------------------------ #
# Routing rules
# ------------------------------------------------------------------ #

PROPERTY_INTENTS = {
    IntentType.PROPERTY_SEARCH,
    IntentType.PROPERTY_INFO,
    IntentType.LOCATION_INQUIRY,
    IntentType.PRICE_INQUIRY,
}

_PROPERTY_VOCABULARY_RE = re.compile(
    r"\b(?:house|houses|property|properties|home|homes|villa|villas|"
    r"apartment|apartments|estate|estates)\b",
    re.IGNORECASE,
)
_KNOWN_LOCATION_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(loc) for loc in KNOWN_LOCATIONS) + r")\b",
    re.IGNORECASE,
)
# "need/looking for/want ... in/at <Place>"; the place must be capitalised
_SEARCH_SHAPE_RE = re.compile(r"\b(?i:need|looking for|want)\b.*\b(?:[Ii]n|[Aa]t)\s+[A-Z]")
_VIEWING_WORD_RE = re.compile(r"\b(?:viewing|visit)", re.IGNORECASE)
_COMPLEX_WORD_RE = re.compile(
    r"\b(?:recommend|compare|analy[sz]e|explain|why|how|market|investment)", re.IGNORECASE,
)

COMPANY_WORDS = (
    "company", "business", "service", "about", "who are you",
    "what do you do", "what is",
)
MARKET_WORDS = ("market", "statistic", "stats", "data")
AVAILABILITY_WORDS = ("available", "availability", "inventory")
AGENT_WORDS = ("agent", "staff", "team")
TASK_WORDS = ("task", "work", "assignment", "progress")
ANALYTICS_WORDS = ("analytics", "perform", "report", "analysis")


def _strip_company_name(text: str) -> str:
    return re.sub(re.escape(settings.company.name), " ", text, flags=re.IGNORECASE)


def _contains_any(text: str, words: tuple[str, ...]) -> bool:
    """Single keywords match as word prefixes; phrases must match whole."""
    lower = text.lower()
    return any(
        re.search(rf"\b{re.escape(word)}\b" if " " in word else rf"\b{re.escape(word)}", lower)
        for word in words
    )


def mentions_property(text: str) -> bool:
    """Property or location vocabulary, ignoring the company's own name."""
    text = _strip_company_name(text)
    if _PROPERTY_VOCABULARY_RE.search(text) or _KNOWN_LOCATION_RE.search(text):
        return True
    return bool(_SEARCH_SHAPE_RE.search(text))


def is_complex_query(text: str) -> bool:
    return len(text) > settings.routing.complex_query_length or bool(_COMPLEX_WORD_RE.search(text))


@dataclass(frozen=True)
class RoutingRule:
    """One entry of the routing chain: a name, a predicate, and where it sends the turn."""

    name: str
    route: Route
    matches: Callable[[str, Intent], bool]


ROUTING_RULES: tuple[RoutingRule, ...] = (
    RoutingRule(
        "property_search",
        Route.PROPERTY_INQUIRY,
        lambda text, intent: mentions_property(text) or intent.type in PROPERTY_INTENTS,
    ),
    RoutingRule(
        "viewing",
        Route.VIEWING_REQUEST,
        lambda text, intent: intent.type == IntentType.VIEWING_REQUEST or bool(_VIEWING_WORD_RE.search(text)),
    ),
    RoutingRule("complex_query", Route.COMPLEX_QUERY, lambda text, intent: is_complex_query(text)),
    RoutingRule("greeting", Route.GREETING, lambda text, intent: intent.type == IntentType.GREETING),
    RoutingRule("company", Route.COMPANY_INQUIRY, lambda text, intent: _contains_any(text, COMPANY_WORDS)),
    RoutingRule("market", Route.MARKET_INQUIRY, lambda text, intent: _contains_any(text, MARKET_WORDS)),
    RoutingRule(
        "availability",
        Route.AVAILABILITY_INQUIRY,
        lambda text, intent: _contains_any(text, AVAILABILITY_WORDS),
    ),
    RoutingRule("agent", Route.AGENT_INQUIRY, lambda text, intent: _contains_any(text, AGENT_WORDS)),
    RoutingRule("task", Route.TASK_INQUIRY, lambda text, intent: _contains_any(text, TASK_WORDS)),
    RoutingRule("analytics", Route.ANALYTICS_INQUIRY, lambda text, intent: _contains_any(text, ANALYTICS_WORDS)),
    RoutingRule("default", Route.COMPLEX_QUERY, lambda text, intent: True),
)


def select_rule(text: str, intent: Intent) -> RoutingRule:
    for rule in ROUTING_RULES:
        if rule.matches(text, intent):
            return rule
    return ROUTING_RULES[-1]


def _continues_booking(text: str, intent: Intent, state: DialogueState) -> bool:
    if intent.entities.has_viewing_slot():
        return True
    if ViewingSlots.from_details(state.viewing_details).is_complete():
        return True
    name_missing = state.viewing_details is None or not state.viewing_details.name
    return name_missing and extract_bare_name(text) is not None


# ------------------------------------------------------------------ #
# Orchestrator
# ------------------------------------------------------------------ #

Handler = Callable[[str, Intent, DialogueState], Awaitable[TurnResult]]


class Orchestrator:
    """
    Stateless per-turn dispatcher.

    All conversational memory lives in the ``DialogueState`` the caller
    passes in and receives back, so one orchestrator can serve any number
    of sessions.
    """

    def __init__(
        self,
        provider: PropertyDataProvider,
        gateway: Optional[LanguageModelGateway] = None,
        knowledge_base: Optional[KnowledgeBase] = None,
        notifier: Optional[ViewingNotifier] = None,
    ) -> None:
        context = AgentContext(
            provider=provider,
            gateway=gateway or LanguageModelGateway(),
            matcher=PropertyMatcher(
                provider,
                limit=settings.routing.match_limit,
                band=settings.routing.price_band,
                recommendation_limit=settings.routing.recommendation_limit,
            ),
            knowledge_base=knowledge_base or KnowledgeBase(),
            notifier=notifier,
        )
        self.context = context
        self.agents = create_agents(context)
        self.property_agent = self.agents["property"]
        self.viewing_agent = self.agents["viewing"]
        self.info_agent = self.agents["info"]

        info = self.info_agent
        self._handlers: dict[Route, Handler] = {
            Route.PROPERTY_INQUIRY: self.property_agent.handle,
            Route.VIEWING_REQUEST: self.viewing_agent.handle,
            Route.COMPLEX_QUERY: lambda text, intent, state: info.complex(text, state),
            Route.GREETING: lambda text, intent, state: info.greeting(text, state),
            Route.COMPANY_INQUIRY: lambda text, intent, state: info.company(text, state),
            Route.MARKET_INQUIRY: lambda text, intent, state: info.market(text, state),
            Route.AVAILABILITY_INQUIRY: lambda text, intent, state: info.availability(text, state),
            Route.AGENT_INQUIRY: lambda text, intent, state: info.agents(text, state),
            Route.TASK_INQUIRY: lambda text, intent, state: info.tasks(text, state),
            Route.ANALYTICS_INQUIRY: lambda text, intent, state: info.analytics(text, state),
            Route.BOOKING_CONFIRMATION: lambda text, intent, state: self.viewing_agent.confirm(text, state),
        }

    def route(self, text: str, intent: Intent, state: DialogueState) -> Route:
        """Pick the route for a turn without running it."""
        if state.step == DialogueStep.CONFIRMING_BOOKING:
            return Route.BOOKING_CONFIRMATION
        if state.step == DialogueStep.COLLECTING_DETAILS and _continues_booking(text, intent, state):
            return Route.VIEWING_REQUEST
        return select_rule(text, intent).route

    async def handle(
        self,
        text: str,
        state: Optional[DialogueState] = None,
        session_id: Optional[str] = None,
    ) -> TurnResult:
        """
        Process one visitor message.

        Never raises. Collaborator failures are handled by the agents; any
        other error produces the static apology and leaves the state as it was.
        """
        if session_id:
            set_session_id(session_id)
        state = state or DialogueState()

        try:
            intent = classify(text)
            route = self.route(text, intent, state)
            logger.info(
                "Turn routed: step=%s intent=%s route=%s",
                state.step.value, intent.type.value, route.value,
            )
            result = await self._handlers[route](text, intent, state)
        except Exception:
            logger.exception("Unhandled error while processing turn")
            return TurnResult(response_text=render_error(), new_state=state, route=Route.ERROR)

        return result.model_copy(update={"new_state": self._remember(result.new_state, text, result.response_text)})

    @staticmethod
    def _remember(state: DialogueState, user_text: str, reply: str) -> DialogueState:
        history = [
            *state.history,
            ChatMessage(role=ChatRole.USER, content=user_text),
            ChatMessage(role=ChatRole.ASSISTANT, content=reply),
        ]
        return state.model_copy(update={"history": history[-settings.routing.max_history_messages:]})
