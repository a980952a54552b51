"""Exceptions raised while setting up and running a search agent turn."""

from __future__ import annotations

from typing import Optional


class SearchAgentError(Exception):
    """Base class for all search agent failures."""


class ConfigurationError(SearchAgentError):
    """Raised when the environment or CLI settings cannot be used."""


class ModelConstructionError(SearchAgentError):
    """Raised when the Gemini model handle cannot be built."""


class AgentConstructionError(SearchAgentError):
    """Raised when ADK rejects the agent definition."""


class SessionCreationError(SearchAgentError):
    """Raised when the session service fails to create a session."""


class RunnerConstructionError(SearchAgentError):
    """Raised when the ADK runner cannot be constructed."""


class AgentStreamError(SearchAgentError):
    """
    Error reported by a single event in the response stream.

    Non-fatal: the turn runner prints it inline and keeps consuming.
    """

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        if self.code:
            return f"{self.code}: {self.message}"
        return self.message


__all__ = [
    "SearchAgentError",
    "ConfigurationError",
    "ModelConstructionError",
    "AgentConstructionError",
    "SessionCreationError",
    "RunnerConstructionError",
    "AgentStreamError",
]
