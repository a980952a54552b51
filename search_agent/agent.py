"""
Search Agent - single Gemini agent with web search.

Model: gemini-2.5-flash (override with SEARCH_AGENT_MODEL or --model)

The agent is a plain ADK LlmAgent. Everything beyond its definition
(planning, tool calls, retries) happens inside ADK and the Gemini API.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from google.adk.agents import LlmAgent
from google.adk.models import Gemini
from google.adk.tools.base_tool import BaseTool
from pydantic import ValidationError

from search_agent.config import (
    AGENT_DESCRIPTION,
    AGENT_INSTRUCTION,
    AGENT_NAME,
    DEFAULT_TOOLS,
    Settings,
)
from search_agent.errors import AgentConstructionError, ModelConstructionError
from search_agent.tools import resolve_tools

logger = logging.getLogger(__name__)


# ============================================================================
# MODEL
# ============================================================================

def client_kwargs_for(settings: Settings) -> Dict[str, Any]:
    """google.genai.Client arguments for the configured credential."""
    if settings.use_vertexai:
        return {
            "vertexai": True,
            "project": settings.project,
            "location": settings.location,
        }
    return {"vertexai": False, "api_key": settings.api_key}


def build_model(settings: Settings) -> Gemini:
    """
    Build the model handle for the agent.

    Credentials go through Gemini's ``client_kwargs`` so ADK still builds
    one client per event loop with its own headers and endpoint settings.
    A client is created eagerly so credential problems surface here rather
    than on the first request.

    Raises:
        ModelConstructionError: If no credential is configured or the client
            cannot be created.
    """
    if not settings.has_credentials():
        if settings.use_vertexai:
            raise ModelConstructionError(
                "failed to create model: GOOGLE_CLOUD_PROJECT is required when GOOGLE_GENAI_USE_VERTEXAI is set"
            )
        raise ModelConstructionError("failed to create model: GEMINI_API_KEY is not set")

    try:
        model = Gemini(model=settings.model_name, client_kwargs=client_kwargs_for(settings))
        _ = model.api_client
    except Exception as e:
        raise ModelConstructionError(f"failed to create model: {e}") from e

    logger.info(
        "Model ready: %s (%s)",
        settings.model_name,
        "vertexai" if settings.use_vertexai else "api key",
    )
    return model


# ============================================================================
# AGENT FACTORY
# ============================================================================

def create_search_agent(
    settings: Settings,
    tools: Optional[Sequence[BaseTool]] = None,
    name: str = AGENT_NAME,
) -> LlmAgent:
    """
    Create the search agent.

    Args:
        settings: Resolved settings (credentials and model name)
        tools: Ordered tool instances; defaults to Google Search
        name: Agent name, must be a valid identifier

    Returns:
        Configured LlmAgent

    Raises:
        ModelConstructionError: If the model cannot be built
        AgentConstructionError: If ADK rejects the agent definition
    """
    model = build_model(settings)
    if tools is None:
        tools = resolve_tools(DEFAULT_TOOLS)

    try:
        agent = LlmAgent(
            name=name,
            model=model,
            description=AGENT_DESCRIPTION,
            instruction=AGENT_INSTRUCTION,
            tools=list(tools),
        )
    except (ValidationError, ValueError) as e:
        raise AgentConstructionError(f"failed to create agent: {e}") from e

    logger.info("Agent created: %s with tools %s", agent.name, [t.name for t in tools])
    return agent


__all__ = [
    "client_kwargs_for",
    "build_model",
    "create_search_agent",
]
