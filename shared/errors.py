"""Exceptions raised and reported by the request orchestrator."""

from typing import Any


class OrchestratorError(Exception):
    """Base class for request orchestrator errors."""

    pass


class DescriptorError(OrchestratorError, ValueError):
    """Raised when an action does not describe a usable HTTP call."""

    pass


class ResponseError(OrchestratorError):
    """
    Error value for a non-200 response whose body has no status_message.

    Reported through outcomes and error actions, never raised by the executor.
    """

    def __init__(self, status: int, data: Any = None):
        super().__init__(f"Request failed with status {status}")
        self.status = status
        self.data = data
