"""
Info agent: answers everything that is not a property search or a booking.

One handler per informational route. Each gathers the provider data it
needs concurrently, asks the language model to present it, and composes a
local answer from the same data when the model call fails.
"""

import asyncio

from concierge.agents.base import BaseAgent
from concierge.errors import DomainDataUnavailable, GatewayError
from concierge.logging_context import get_session_logger
from concierge.prompts.prompt_templates import (
    CONTACT_PROMPT,
    availability_lines,
    format_analytics_data,
    format_availability_data,
    format_company_context,
    format_company_summary,
    format_market_data,
    format_property_data,
    format_stats_summary,
    format_task_overview,
    format_team_overview,
    render_greeting,
)
from concierge.prompts.system_prompts import (
    AGENT_TASK,
    ANALYTICS_TASK,
    AVAILABILITY_TASK,
    COMPANY_TASK,
    COMPLEX_TASK,
    GREETING_TASK,
    MARKET_TASK,
    TASK_TASK,
)
from concierge.schemas.conversation_schema import (
    AgentCardsVisual,
    DialogueState,
    InfoCardVisual,
    Route,
    StatsVisual,
    TurnResult,
)
from concierge.schemas.property_schema import TaskStatus

logger = get_session_logger(__name__)

AGENT_LIST_WORDS = ("list", "who")
PENDING_TASK_WORDS = ("pending", "urgent")


def _wants(message: str, words: tuple[str, ...]) -> bool:
    lower = message.lower()
    return any(word in lower for word in words)


class InfoAgent(BaseAgent):
    """Company, market, team and general knowledge specialist."""

    def _reply(self, state: DialogueState, route: Route, text: str, visual=None) -> TurnResult:
        return TurnResult(
            response_text=text,
            new_state=self._converse(state),
            route=route,
            visual=visual,
        )

    async def greeting(self, message: str, state: DialogueState) -> TurnResult:
        try:
            company, stats = await asyncio.gather(
                self.ctx.provider.get_company_info(),
                self.ctx.provider.get_property_stats(),
            )
            text = await self._generate(
                message, state,
                f"{GREETING_TASK}\n\n{format_company_context(company, stats)}",
                "",
            )
        except (DomainDataUnavailable, GatewayError) as exc:
            logger.warning("Greeting falls back to the static welcome: %s", exc)
            text = render_greeting()
        return self._reply(state, Route.GREETING, text)

    async def company(self, message: str, state: DialogueState) -> TurnResult:
        try:
            company, stats = await asyncio.gather(
                self.ctx.provider.get_company_info(),
                self.ctx.provider.get_property_stats(),
            )
        except DomainDataUnavailable:
            logger.error("Company data unavailable", exc_info=True)
            answer = self.ctx.knowledge_base.best_answer(message)
            if answer:
                return self._reply(state, Route.COMPANY_INQUIRY, answer)
            return self._unavailable(state, Route.COMPANY_INQUIRY, "company information")

        try:
            text = await self._generate(
                message, state,
                f"{COMPANY_TASK}\n\n{format_company_context(company, stats)}",
                "",
            )
        except GatewayError as exc:
            logger.warning("Gateway failed for company inquiry, composing locally: %s", exc)
            text = self.ctx.knowledge_base.best_answer(message) or format_company_summary(company)
        return self._reply(state, Route.COMPANY_INQUIRY, text)

    async def market(self, message: str, state: DialogueState) -> TurnResult:
        try:
            stats, agent_stats, analytics = await asyncio.gather(
                self.ctx.provider.get_property_stats(),
                self.ctx.provider.get_agent_stats(),
                self.ctx.provider.get_property_analytics(),
            )
        except DomainDataUnavailable:
            logger.error("Market data unavailable", exc_info=True)
            return self._unavailable(state, Route.MARKET_INQUIRY, "market information")

        insights = self.ctx.knowledge_base.get_market_insights()
        try:
            text = await self._generate(
                message, state,
                MARKET_TASK,
                format_market_data(stats, agent_stats, analytics, insights),
            )
        except GatewayError as exc:
            logger.warning("Gateway failed for market inquiry, composing from stats: %s", exc)
            text = f"{format_stats_summary(stats, insights)}\n\n{CONTACT_PROMPT}"
        return self._reply(state, Route.MARKET_INQUIRY, text, StatsVisual(stats=stats))

    async def availability(self, message: str, state: DialogueState) -> TurnResult:
        try:
            report = await self.ctx.provider.get_availability_report()
        except DomainDataUnavailable:
            logger.error("Availability data unavailable", exc_info=True)
            return self._unavailable(state, Route.AVAILABILITY_INQUIRY, "availability questions")

        context = format_availability_data(report)
        try:
            text = await self._generate(message, state, AVAILABILITY_TASK, context)
        except GatewayError as exc:
            logger.warning("Gateway failed for availability inquiry, composing locally: %s", exc)
            text = f"Here's our current inventory:\n\n{context}\n\n{CONTACT_PROMPT}"
        visual = InfoCardVisual(title="Availability", lines=availability_lines(report))
        return self._reply(state, Route.AVAILABILITY_INQUIRY, text, visual)

    async def agents(self, message: str, state: DialogueState) -> TurnResult:
        try:
            agents, agent_stats = await asyncio.gather(
                self.ctx.provider.get_all_agents(),
                self.ctx.provider.get_agent_stats(),
            )
        except DomainDataUnavailable:
            logger.error("Agent data unavailable", exc_info=True)
            return self._unavailable(state, Route.AGENT_INQUIRY, "agent inquiries")

        list_agents = _wants(message, AGENT_LIST_WORDS)
        overview = format_team_overview(agents, agent_stats, list_agents)
        try:
            text = await self._generate(message, state, AGENT_TASK, overview)
        except GatewayError as exc:
            logger.warning("Gateway failed for agent inquiry, composing locally: %s", exc)
            text = overview
        visual = AgentCardsVisual(agents=agents) if list_agents else None
        return self._reply(state, Route.AGENT_INQUIRY, text, visual)

    async def tasks(self, message: str, state: DialogueState) -> TurnResult:
        try:
            task_stats, pending = await asyncio.gather(
                self.ctx.provider.get_task_stats(),
                self.ctx.provider.get_tasks_by_status(TaskStatus.PENDING),
            )
        except DomainDataUnavailable:
            logger.error("Task data unavailable", exc_info=True)
            return self._unavailable(state, Route.TASK_INQUIRY, "task inquiries")

        overview = format_task_overview(
            task_stats, pending if _wants(message, PENDING_TASK_WORDS) else None,
        )
        try:
            text = await self._generate(message, state, TASK_TASK, overview)
        except GatewayError as exc:
            logger.warning("Gateway failed for task inquiry, composing locally: %s", exc)
            text = overview
        return self._reply(state, Route.TASK_INQUIRY, text)

    async def analytics(self, message: str, state: DialogueState) -> TurnResult:
        try:
            analytics, stats = await asyncio.gather(
                self.ctx.provider.get_property_analytics(),
                self.ctx.provider.get_property_stats(),
            )
        except DomainDataUnavailable:
            logger.error("Analytics data unavailable", exc_info=True)
            return self._unavailable(state, Route.ANALYTICS_INQUIRY, "business analytics")

        context = format_analytics_data(analytics)
        try:
            text = await self._generate(message, state, ANALYTICS_TASK, context)
        except GatewayError as exc:
            logger.warning("Gateway failed for analytics inquiry, composing locally: %s", exc)
            text = f"**Portfolio Analytics**\n\n{context}"
        return self._reply(state, Route.ANALYTICS_INQUIRY, text, StatsVisual(stats=stats))

    async def complex(self, message: str, state: DialogueState) -> TurnResult:
        """Open-ended questions, answered with company, market and property data together."""
        try:
            company, stats, agent_stats, analytics, properties = await asyncio.gather(
                self.ctx.provider.get_company_info(),
                self.ctx.provider.get_property_stats(),
                self.ctx.provider.get_agent_stats(),
                self.ctx.provider.get_property_analytics(),
                self.ctx.provider.get_all_properties(),
            )
        except DomainDataUnavailable:
            logger.error("Domain data unavailable for general question", exc_info=True)
            answer = self.ctx.knowledge_base.best_answer(message)
            if answer:
                return self._reply(state, Route.COMPLEX_QUERY, answer)
            return self._unavailable(state, Route.COMPLEX_QUERY, "your inquiry")

        insights = self.ctx.knowledge_base.get_market_insights()
        company_context = "\n\n".join([
            COMPLEX_TASK,
            format_company_context(company, stats),
            format_market_data(stats, agent_stats, analytics, insights),
        ])
        try:
            text = await self._generate(message, state, company_context, format_property_data(properties))
        except GatewayError as exc:
            logger.warning("Gateway failed for general question, composing locally: %s", exc)
            text = self.ctx.knowledge_base.best_answer(message) or (
                f"{format_stats_summary(stats, insights)}\n\n{CONTACT_PROMPT}"
            )
        return self._reply(state, Route.COMPLEX_QUERY, text)
