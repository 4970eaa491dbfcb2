"""
Console front end: chat with the concierge in a terminal.

Drives the real orchestrator against the bundled fixture portfolio. With no
OPENROUTER_API_KEY configured every language-model call fails fast and the
handlers answer from local data, so the demo runs fully offline.

Usage:
    python console_demo.py
    python console_demo.py --scenario booking
    python console_demo.py --scenario info
"""

import argparse
import asyncio
from typing import Optional

from concierge.agents.viewing_agent import pending_slot_names
from concierge.config import settings
from concierge.logging_context import new_session_id
from concierge.orchestrator import Orchestrator
from concierge.schemas.conversation_schema import (
    AgentCardsVisual,
    DialogueState,
    InfoCardVisual,
    PropertyCardsVisual,
    StatsVisual,
    TipVisual,
    TurnResult,
)
from concierge.tools.notifications import AgentNotifier
from concierge.tools.portfolio import InMemoryDataProvider
from concierge.utils import format_money

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


class ConsoleSession:
    """One visitor session in the terminal."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "search": [
            "Hello",
            "I need a 3 bedroom house in Karen",
            "Anything in Westlands under 150 million?",
            "Show me your statistics",
        ],
        "booking": [
            "I'm looking for a villa in Karen",
            "I'd like to book a viewing",
            "My name is Jane Wanjiku, email jane@example.com",
            "Saturday at 10am",
            "yes",
        ],
        "info": [
            "Hi there",
            "Tell me about your company",
            "Who are your agents?",
            "Any pending tasks?",
            "What's available right now?",
        ],
    }

    MAX_INPUT_LENGTH = 500

    def __init__(self, orchestrator: Optional[Orchestrator] = None) -> None:
        self.notifier = AgentNotifier()
        self.orchestrator = orchestrator or Orchestrator(
            InMemoryDataProvider.from_fixture(),
            notifier=self.notifier,
        )
        self.state = DialogueState()
        self.session_id = new_session_id("console")
        self.trace: list[str] = [self.state.step.value]

    def agent_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[{settings.assistant_name}]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {title}{RESET}")
        print(f"{BOLD}  Company: {settings.company.name}{RESET}")
        if not self.orchestrator.context.gateway.available:
            print(f"{YELLOW}  Offline mode: answers are composed from local data{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def _summary(self, label: str) -> None:
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {label}{RESET}")
        print(f"{DIM}  State trace: {' -> '.join(self.trace)}{RESET}")
        print(f"{DIM}  Viewing requests sent: {len(self.notifier.outbox)}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def _show_visual(self, result: TurnResult) -> None:
        visual = result.visual
        if isinstance(visual, PropertyCardsVisual):
            self.system_log(f"{visual.label}: {len(visual.properties)} properties")
            for prop in visual.properties:
                self.system_log(
                    f"  #{prop.id} {prop.title} | {prop.location} | "
                    f"{format_money(prop.price, settings.company.currency)}"
                )
        elif isinstance(visual, StatsVisual):
            self.system_log(
                f"stats: {visual.stats.total_properties} properties, average "
                f"{format_money(visual.stats.average_price, settings.company.currency)}"
            )
        elif isinstance(visual, AgentCardsVisual):
            self.system_log("agents: " + ", ".join(a.name or "Agent" for a in visual.agents))
        elif isinstance(visual, InfoCardVisual):
            self.system_log(f"{visual.title}: " + ", ".join(visual.lines))
        elif isinstance(visual, TipVisual):
            self.system_log(f"tip: {visual.text}")

    async def _process_input(self, text: str) -> None:
        result = await self.orchestrator.handle(text, self.state, session_id=self.session_id)
        self.state = result.new_state
        self.agent_say(result.response_text)
        self._show_visual(result)

        if result.side_effect is not None:
            delivered = {True: "delivered", False: "FAILED", None: "not sent"}[result.side_effect.delivered]
            color = RED if result.side_effect.delivered is False else YELLOW
            print(f"{color}  >> viewing request {delivered}{RESET}")

        if self.trace[-1] != self.state.step.value:
            self.trace.append(self.state.step.value)
        missing = pending_slot_names(self.state)
        self.system_log(f"Route: {result.route.value} | State: {self.state.step.value}")
        if missing:
            self.system_log(f"Missing viewing details: {', '.join(missing)}")

    async def _run_scenario(self, scenario: str) -> None:
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"PROPERTY CONCIERGE - Scenario: {scenario}")
        for step in steps:
            print(f"\n{BLUE}[Visitor] {RESET}{step}")
            await self._process_input(step)
        self._summary(f"Scenario '{scenario}' complete.")

    async def _run(self) -> None:
        self._banner("PROPERTY CONCIERGE - Console Demo")
        print(f"{BOLD}  Type 'quit' to exit{RESET}")

        while True:
            user_input = input(f"\n{BLUE}[Visitor] {RESET}").strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                break

            if len(user_input) > self.MAX_INPUT_LENGTH:
                self.agent_say("That was quite long. Could you keep it brief for me?")
                continue

            await self._process_input(user_input)

        self._summary("Conversation complete.")

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        asyncio.run(self._run_scenario(scenario))

    def run(self) -> None:
        asyncio.run(self._run())


def main() -> None:
    parser = argparse.ArgumentParser(description="Property concierge console")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()
