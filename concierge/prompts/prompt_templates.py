"""Static response templates and context-block builders for completions.

Context builders turn provider data into the bounded plain-text blocks the
language model sees. The same blocks double as the locally composed answer
when the language model is unavailable.
"""

from typing import Optional

from concierge.config import settings
from concierge.schemas.conversation_schema import Entities
from concierge.schemas.property_schema import (
    Agent,
    AgentStats,
    AvailabilityReport,
    CompanyInfo,
    Property,
    PropertyAnalytics,
    PropertyStats,
    Task,
    TaskStats,
)
from concierge.tools.knowledge_base import MarketEntry
from concierge.utils import format_money, truncate

DESCRIPTION_LIMIT = 200
BIO_LIMIT = 100
LISTED_ITEM_LIMIT = 5

_company = settings.company


def _money(amount: float) -> str:
    return format_money(amount, _company.currency)


# ------------------------------------------------------------------ #
# Static templates
# ------------------------------------------------------------------ #

def render_greeting() -> str:
    return (
        f"Hello! I'm your {settings.assistant_name} for {_company.name}. I can help you with:\n\n"
        "• **Property Search** - Find luxury properties by location, price, or features\n"
        "• **Company Information** - Learn about our services and expertise\n"
        "• **Market Insights** - Get current market data and trends\n"
        "• **Viewing Arrangements** - Schedule property viewings with our agents\n"
        "• **Investment Advice** - Understand property investment opportunities\n\n"
        "What would you like to know about our luxury property collection?"
    )


def render_error() -> str:
    return (
        "I apologize, but I'm experiencing some technical difficulties. Please try again "
        f"in a moment, or contact our office directly at {_company.email} or "
        f"{_company.phone} for immediate assistance."
    )


def render_contact_fallback(topic: str = "your inquiry") -> str:
    return (
        f"I'm having trouble accessing that information right now. Please contact our "
        f"team at {_company.phone} or {_company.email} for immediate assistance with {topic}."
    )


NO_RESULTS = (
    "I couldn't find properties matching your exact criteria, but I'd be happy to show "
    "you similar options or help you refine your search."
)

CONTACT_PROMPT = (
    "Would you like me to connect you with one of our experienced agents for a "
    "personalized consultation? They can provide detailed insights and arrange property "
    "viewings at your convenience."
)

VIEWING_TIP = "All viewings are by appointment, with at least 24 hours' notice."


# ------------------------------------------------------------------ #
# Context builders
# ------------------------------------------------------------------ #

def format_company_context(company: CompanyInfo, stats: PropertyStats) -> str:
    return "\n".join([
        f"COMPANY: {company.name}",
        f"DESCRIPTION: {company.description}",
        "",
        f"SERVICES: {', '.join(company.services)}",
        f"LOCATIONS: {', '.join(company.locations)}",
        f"SPECIALTIES: {', '.join(company.specialties)}",
        "",
        "CONTACT:",
        f"- Phone: {company.contact.phone}",
        f"- Email: {company.contact.email}",
        f"- Address: {company.contact.address}",
        "",
        "CURRENT STATISTICS:",
        f"- Total Properties: {stats.total_properties}",
        f"- Average Price: {_money(stats.average_price)}",
        f"- Price Range: {_money(stats.price_range.min)} - {_money(stats.price_range.max)}",
    ])


def format_property(prop: Property) -> str:
    size = f"{prop.size:,.0f} sq ft" if prop.size else "n/a"
    return "\n".join([
        f"PROPERTY: {prop.title} (ID {prop.id})",
        f"- Location: {prop.location}",
        f"- Price: {_money(prop.price)}",
        f"- Bedrooms: {prop.bedrooms}",
        f"- Bathrooms: {prop.bathrooms}",
        f"- Size: {size}",
        f"- Status: {prop.status.value}",
        f"- Description: {truncate(prop.description, DESCRIPTION_LIMIT)}",
    ])


def format_property_data(properties: list[Property], limit: int = settings.routing.context_property_limit) -> str:
    """Serialise at most ``limit`` properties; descriptions are cut at 200 characters."""
    if not properties:
        return "No properties currently available."
    return "\n\n".join(format_property(p) for p in properties[:limit])


def format_search_context(
    entities: Entities,
    matched: int,
    stats: PropertyStats,
    preferences_note: Optional[str] = None,
) -> str:
    lines = [
        f"SEARCH CRITERIA: {entities.model_dump_json(exclude_none=True)}",
        f"MATCHED PROPERTIES: {matched}",
        f"TOTAL AVAILABLE: {stats.total_properties}",
        f"AVERAGE PRICE: {_money(stats.average_price)}",
        f"LOCATIONS: {', '.join(stats.location_counts)}",
    ]
    if preferences_note:
        lines.append(f"VISITOR PREFERENCES: {preferences_note}")
    return "\n".join(lines)


def format_property_highlights(properties: list[Property]) -> str:
    """Numbered one-line summaries, used when composing answers locally."""
    return "\n".join(
        f"{i}. **{p.title}** - {p.location}, {p.bedrooms} bed, {_money(p.price)} ({p.status.value})"
        for i, p in enumerate(properties, start=1)
    )


def format_market_data(
    stats: PropertyStats,
    agent_stats: AgentStats,
    analytics: PropertyAnalytics,
    insights: list[MarketEntry],
) -> str:
    lines = [
        "PROPERTY STATISTICS:",
        f"- Total Properties: {stats.total_properties}",
        f"- Average Price: {_money(stats.average_price)}",
        f"- Price Range: {_money(stats.price_range.min)} - {_money(stats.price_range.max)}",
        f"- Total Portfolio Value: {_money(analytics.total_value)}",
        "",
        "LOCATION DISTRIBUTION:",
    ]
    lines.extend(f"- {location}: {count} properties" for location, count in stats.location_counts.items())
    lines.extend(["", "PROPERTY STATUS:"])
    lines.extend(f"- {status}: {count} properties" for status, count in stats.status_counts.items())
    lines.extend([
        "",
        "TEAM PERFORMANCE:",
        f"- Active Agents: {agent_stats.total_agents}",
        f"- Agents with Properties: {agent_stats.agents_with_properties}",
        f"- Average Properties per Agent: {agent_stats.average_properties_per_agent:.1f}",
        "",
        "MARKET INSIGHTS:",
    ])
    lines.extend(f"- {i.area}: {i.trend} trend, {i.average_price}" for i in insights)
    return "\n".join(lines)


def format_stats_summary(stats: PropertyStats, insights: list[MarketEntry]) -> str:
    """Market answer composed straight from the statistics."""
    lines = [
        "**Market Overview**",
        "",
        f"• Total Properties: {stats.total_properties}",
        f"• Average Price: {_money(stats.average_price)}",
        f"• Price Range: {_money(stats.price_range.min)} - {_money(stats.price_range.max)}",
    ]
    if stats.location_counts:
        lines.extend(["", "**By Location:**"])
        lines.extend(f"• {location}: {count}" for location, count in stats.location_counts.items())
    if insights:
        lines.extend(["", "**Area Trends:**"])
        lines.extend(f"• {i.area}: {i.trend}, {i.average_price}" for i in insights)
    return "\n".join(lines)


def format_availability_data(report: AvailabilityReport) -> str:
    lines = [
        "CURRENT INVENTORY:",
        f"- Available for Sale: {report.available_for_sale} properties",
        f"- Available for Rent: {report.available_for_rent} properties",
        f"- Sold: {report.sold} properties",
        f"- Rented: {report.rented} properties",
        f"- Total Inventory: {report.total_inventory} properties",
        "",
        "AVAILABILITY BY LOCATION:",
    ]
    lines.extend(
        f"- {location}: {data.for_sale} for sale, {data.for_rent} for rent"
        for location, data in report.availability_by_location.items()
    )
    return "\n".join(lines)


def availability_lines(report: AvailabilityReport) -> list[str]:
    return [
        f"{report.available_for_sale} for sale",
        f"{report.available_for_rent} for rent",
        f"{report.sold} sold",
        f"{report.rented} rented",
        f"{report.total_inventory} in total",
    ]


def format_team_overview(agents: list[Agent], agent_stats: AgentStats, list_agents: bool) -> str:
    lines = [
        "**Our Professional Team**",
        "",
        "**Team Overview:**",
        f"• Total Agents: {agent_stats.total_agents}",
        f"• Active Agents with Properties: {agent_stats.agents_with_properties}",
        f"• Average Properties per Agent: {agent_stats.average_properties_per_agent:.1f}",
    ]
    if list_agents:
        lines.extend(["", "**Our Agents:**"])
        for agent in agents[:LISTED_ITEM_LIMIT]:
            lines.append(f"• **{agent.name or 'Agent'}** - {agent.email or 'Contact via office'}")
            if agent.bio:
                lines.append(f"  {truncate(agent.bio, BIO_LIMIT)}")
    lines.extend(["", "Would you like to be connected with a specific agent or learn about their specialties?"])
    return "\n".join(lines)


def format_task_overview(task_stats: TaskStats, pending: Optional[list[Task]] = None) -> str:
    lines = [
        "**Task Management Overview**",
        "",
        "**Current Tasks:**",
        f"• Total Tasks: {task_stats.total_tasks}",
        f"• Pending: {task_stats.pending_tasks}",
        f"• In Progress: {task_stats.in_progress_tasks}",
        f"• Completed: {task_stats.completed_tasks}",
        f"• High Priority: {task_stats.high_priority_tasks}",
    ]
    if pending is not None:
        lines.extend(["", "**Pending Tasks:**"])
        for task in pending[:LISTED_ITEM_LIMIT]:
            lines.append(f"• **{task.title}** ({task.priority.value} priority)")
            if task.due_date:
                lines.append(f"  Due: {task.due_date}")
    lines.extend(["", "Would you like details about specific tasks or agent assignments?"])
    return "\n".join(lines)


def format_analytics_data(analytics: PropertyAnalytics) -> str:
    lines = [
        "PORTFOLIO OVERVIEW:",
        f"- Total Portfolio Value: {_money(analytics.total_value)}",
        "",
        "AVERAGE PRICES BY LOCATION:",
    ]
    lines.extend(
        f"- {location}: {_money(price)}" for location, price in analytics.average_price_by_location.items()
    )
    lines.extend(["", "TOP PERFORMING AGENTS:"])
    lines.extend(
        f"{i}. {a.agent_name}: {a.property_count} properties, {_money(a.total_value)}"
        for i, a in enumerate(analytics.top_performing_agents, start=1)
    )
    return "\n".join(lines)


def format_company_summary(company: CompanyInfo) -> str:
    """Company answer composed from the profile alone."""
    lines = [f"**{company.name}**", "", company.description, "", "**Our Services:**"]
    lines.extend(f"• {service}" for service in company.services)
    lines.extend([
        "",
        f"You can reach us on {company.contact.phone} or {company.contact.email}.",
        "",
        CONTACT_PROMPT,
    ])
    return "\n".join(lines)
