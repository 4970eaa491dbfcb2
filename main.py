"""
Concierge entry point.

Usage:
    Console chat:       python main.py console
    Scripted scenario:  python main.py console --scenario booking
    Connection check:   python main.py check
"""

import asyncio
import logging
import sys

from concierge.config import settings

logger = logging.getLogger(__name__)


def _run_connection_check() -> int:
    """Round-trip a test prompt through the configured model."""
    from concierge.gateway import LanguageModelGateway

    gateway = LanguageModelGateway()
    ok = asyncio.run(gateway.check_connection())
    if ok:
        logger.info("Language model connection OK (%s)", settings.model.llm_model)
        return 0
    logger.error("Language model connection failed (%s)", settings.model.llm_model)
    return 1


def _run_console_mode(argv: list[str]) -> None:
    """Start the console chat (runs offline when no API key is set)."""
    from console_demo import ConsoleSession

    session = ConsoleSession()
    if len(argv) > 1 and argv[0] == "--scenario":
        session.run_scenario(argv[1])
    else:
        session.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "check":
        sys.exit(_run_connection_check())
    _run_console_mode(sys.argv[2:] if len(sys.argv) > 1 and sys.argv[1] == "console" else sys.argv[1:])
