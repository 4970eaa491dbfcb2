from concierge.agents.base import AgentContext, BaseAgent
from concierge.agents.info_agent import InfoAgent
from concierge.agents.property_agent import PropertyAgent
from concierge.agents.viewing_agent import ViewingAgent
from concierge.agents.registry import (
    create_agent,
    create_agents,
    get_registered_agents,
    register_agent,
    unregister_agent,
)

__all__ = [
    "AgentContext", "BaseAgent", "PropertyAgent", "ViewingAgent", "InfoAgent",
    "create_agent", "create_agents", "register_agent", "unregister_agent",
    "get_registered_agents",
]
