"""
Tool registry for the search agent.

Agents hold an ordered list of ADK tool instances chosen at construction
time. Tools are looked up by name so the CLI can select them.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from google.adk.tools import google_search
from google.adk.tools.base_tool import BaseTool

from search_agent.errors import ConfigurationError

logger = logging.getLogger(__name__)

TOOL_REGISTRY: Dict[str, BaseTool] = {
    "google_search": google_search,
}


def resolve_tools(names: Iterable[str]) -> List[BaseTool]:
    """
    Map tool names to tool instances.

    Order follows the first occurrence of each name; repeats are dropped.

    Raises:
        ConfigurationError: On an unknown name or an empty selection.
    """
    tools: List[BaseTool] = []
    seen = set()
    for raw in names:
        name = raw.strip().lower()
        if name in seen:
            continue
        tool = TOOL_REGISTRY.get(name)
        if tool is None:
            available = ", ".join(sorted(TOOL_REGISTRY))
            raise ConfigurationError(f"unknown tool '{raw}' (available: {available})")
        seen.add(name)
        tools.append(tool)

    if not tools:
        raise ConfigurationError("at least one tool is required")

    logger.debug("Resolved tools: %s", [t.name for t in tools])
    return tools


__all__ = ["TOOL_REGISTRY", "resolve_tools"]
