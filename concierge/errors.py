"""Exception hierarchy for collaborator failures.

Every exception here is raised at a collaborator boundary (data provider,
language-model gateway, notification sink) and caught by the handler that
made the call. None of them is allowed to reach the caller of
``Orchestrator.handle``.
"""

from typing import Optional


class ConciergeError(Exception):
    """Base class for all concierge errors."""


class DomainDataUnavailable(ConciergeError):
    """The property/agent/task data provider could not serve a request."""


class GatewayError(ConciergeError):
    """The language-model gateway could not produce a usable completion."""


class ApiError(GatewayError):
    """The remote completion call failed, timed out, or returned no choices."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(GatewayError):
    """The completion came back in an unexpected script or without Latin text."""


class NotificationError(ConciergeError):
    """A confirmed viewing request could not be delivered to an agent."""
