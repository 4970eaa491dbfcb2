"""
Agent registry: handlers are looked up by name and built from a shared context.

The orchestrator never imports agent classes directly. It asks the registry
for one agent per role, all sharing the same ``AgentContext``, so an extra
role can be plugged in without touching the routing code.
"""

import logging
from typing import Callable

from concierge.agents.base import AgentContext, BaseAgent

logger = logging.getLogger(__name__)

AgentFactory = Callable[[AgentContext], BaseAgent]

BUILTIN_ROLES = ("property", "viewing", "info")

_AGENT_REGISTRY: dict[str, AgentFactory] = {}


def register_agent(name: str, factory: AgentFactory) -> None:
    """Register an agent factory by name. Re-registering a name replaces it."""
    if name in _AGENT_REGISTRY:
        logger.info("Agent '%s' re-registered", name)
    _AGENT_REGISTRY[name] = factory


def unregister_agent(name: str) -> None:
    """Remove a registered agent. Built-in roles cannot be removed."""
    if name in BUILTIN_ROLES:
        raise ValueError(f"Cannot unregister built-in agent '{name}'")
    _AGENT_REGISTRY.pop(name, None)


def create_agent(name: str, context: AgentContext) -> BaseAgent:
    """Build the agent registered under ``name``.

    Raises:
        KeyError: If the agent name is not registered.
    """
    try:
        factory = _AGENT_REGISTRY[name]
    except KeyError:
        raise KeyError(f"Agent '{name}' not registered. Available: {sorted(_AGENT_REGISTRY)}") from None
    return factory(context)


def create_agents(context: AgentContext) -> dict[str, BaseAgent]:
    """One instance of every registered agent, all sharing ``context``."""
    return {name: factory(context) for name, factory in _AGENT_REGISTRY.items()}


def get_registered_agents() -> list[str]:
    return sorted(_AGENT_REGISTRY)


def _auto_register() -> None:
    from concierge.agents.info_agent import InfoAgent
    from concierge.agents.property_agent import PropertyAgent
    from concierge.agents.viewing_agent import ViewingAgent

    register_agent("property", PropertyAgent)
    register_agent("viewing", ViewingAgent)
    register_agent("info", InfoAgent)


_auto_register()
