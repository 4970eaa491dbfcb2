"""Tests for the agent registry and agent-level helpers."""

import pytest

from concierge.agents import (
    InfoAgent,
    ViewingAgent,
    create_agent,
    create_agents,
    get_registered_agents,
    register_agent,
    unregister_agent,
)
from concierge.agents.base import AgentContext
from concierge.agents.property_agent import merge_preferences
from concierge.agents.viewing_agent import pending_slot_names
from concierge.schemas.conversation_schema import (
    DialogueState,
    DialogueStep,
    Entities,
    PriceRange,
    Route,
    UserPreferences,
    ViewingDetails,
)
from concierge.tools.matcher import PropertyMatcher


@pytest.fixture
def context(provider, offline_gateway):
    return AgentContext(provider=provider, gateway=offline_gateway, matcher=PropertyMatcher(provider))


class TestRegistry:
    def test_builtin_agents_registered(self):
        assert {"property", "viewing", "info"} <= set(get_registered_agents())

    def test_create_by_name(self, context):
        agent = create_agent("viewing", context)
        assert isinstance(agent, ViewingAgent)
        assert agent.ctx is context

    def test_unknown_name(self, context):
        with pytest.raises(KeyError, match="not registered"):
            create_agent("mortgage", context)

    def test_agents_share_context(self, context):
        agents = create_agents(context)
        assert agents["property"].ctx is agents["info"].ctx is context

    def test_register_custom_agent(self, context):
        register_agent("custom_info", InfoAgent)
        try:
            assert isinstance(create_agent("custom_info", context), InfoAgent)
        finally:
            unregister_agent("custom_info")
        assert "custom_info" not in get_registered_agents()

    def test_builtin_cannot_be_removed(self):
        with pytest.raises(ValueError):
            unregister_agent("viewing")


class TestMergePreferences:
    def test_new_values_override(self):
        current = UserPreferences(location="Karen", bedrooms=4)
        merged = merge_preferences(current, Entities(bedrooms=3))
        assert merged.location == "Karen"
        assert merged.bedrooms == 3

    def test_does_not_mutate_current(self):
        current = UserPreferences(location="Karen")
        merge_preferences(current, Entities(location="Runda"))
        assert current.location == "Karen"

    def test_from_nothing(self):
        merged = merge_preferences(None, Entities(price_range=PriceRange(max=50_000_000)))
        assert merged.price_range.max == 50_000_000


class TestPendingSlots:
    def test_no_booking(self):
        assert pending_slot_names(DialogueState()) is None

    def test_lists_missing(self):
        state = DialogueState(
            step=DialogueStep.COLLECTING_DETAILS,
            viewing_details=ViewingDetails(name="Jane", time="10am"),
        )
        assert pending_slot_names(state) == ["contact", "date"]


class TestInfoAgent:
    @pytest.mark.asyncio
    async def test_agents_without_list_words_has_no_cards(self, context):
        result = await InfoAgent(context).agents("How big is your team?", DialogueState())
        assert result.route == Route.AGENT_INQUIRY
        assert result.visual is None
        assert "**Our Agents:**" not in result.response_text

    @pytest.mark.asyncio
    async def test_task_summary_without_pending_list(self, context):
        result = await InfoAgent(context).tasks("How is the work going?", DialogueState())
        assert "Total Tasks: 6" in result.response_text
        assert "**Pending Tasks:**" not in result.response_text

    @pytest.mark.asyncio
    async def test_analytics_fallback(self, context):
        result = await InfoAgent(context).analytics("analytics", DialogueState())
        assert result.response_text.startswith("**Portfolio Analytics**")
        assert "Grace Wanjiru" in result.response_text
        assert result.visual.type == "stats"

    @pytest.mark.asyncio
    async def test_company_fallback_without_knowledge_hit(self, context):
        result = await InfoAgent(context).company("zzz", DialogueState())
        assert result.response_text.startswith("**Musili Homes**")
        assert result.new_state.step == DialogueStep.GENERAL_CHAT
